import os
import json


class ConfigManager:

    def __init__(self, config_file='./config.json', env_vars_prefix='SCIM_'):
        self.config_file = config_file
        self.env_vars_prefix = env_vars_prefix
        self.config = {}

    def load_config(self):
        # Load from file
        if os.path.exists(self.config_file):
            with open(self.config_file, "r") as file:
                self.config = json.load(file)

        # Environment overrides, SCIM_DIRECTORY__TOKEN -> directory.token
        for name, value in os.environ.items():
            if not name.startswith(self.env_vars_prefix):
                continue
            key = name[len(self.env_vars_prefix):].lower().replace('__', '.')
            if key:
                self._set_config(key, self._parse_env_value(value))

    def get(self, key, default=None):
        value = self._get_config(key)
        if value is None:
            return default
        return value

    def set(self, key, value):
        self._set_config(key, value)

    def keys(self):
        return list(self._get_keys(self.config))

    def _get_keys(self, config, prefix=""):
        for key, value in config.items():
            if isinstance(value, dict):
                yield from self._get_keys(value, f"{prefix}{key}.")
            else:
                yield f"{prefix}{key}"

    def _set_config(self, key, value):
        keys = key.split(".")
        config = self.config
        for key in keys[:-1]:
            config = config.setdefault(key, {})
        config[keys[-1]] = value

    def _get_config(self, key):
        keys = key.split(".")
        config = self.config
        for key in keys[:-1]:
            config = config.get(key, {})
            if not isinstance(config, dict):
                return None
        return config.get(keys[-1], None)

    @staticmethod
    def _parse_env_value(value: str):
        try:
            return json.loads(value)
        except ValueError:
            return value
