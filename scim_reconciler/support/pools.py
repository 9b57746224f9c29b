from concurrent.futures import ThreadPoolExecutor

import asyncio


class Pools:
    def __init__(self, directory_pool: ThreadPoolExecutor):
        self.directory_pool = directory_pool

    @staticmethod
    async def async_gen(pool: ThreadPoolExecutor, fn, *args, **kwargs):
        def gen_next(gen):
            try:
                return next(gen)
            except StopIteration:
                pass

        gen = await asyncio.wrap_future(pool.submit(fn, *args, **kwargs))
        while True:
            if (i := await asyncio.wrap_future(pool.submit(gen_next, gen))) is None:
                break
            yield i

    @staticmethod
    async def async_gen_all(pool: ThreadPoolExecutor, fn, *args, **kwargs):
        items = []
        async for page in Pools.async_gen(pool, fn, *args, **kwargs):
            items += page
        return items

    def dr(self, fn, *args, **kwargs):
        return asyncio.wrap_future(self.directory_pool.submit(fn, *args, **kwargs))

    async def dr_gen_all(self, fn, *args, **kwargs):
        return await self.async_gen_all(self.directory_pool, fn, *args, **kwargs)

    def shutdown(self, wait=True):
        self.directory_pool.shutdown(wait=wait)
