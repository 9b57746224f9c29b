from pprint import pprint
import json
import os
import pandas as pd

from .results import ReconciliationResult, MutationStatus


class Stats:
    def __init__(self):
        self.groups = {}
        self.totals = {
            "reconciled": 0,
            "failed": 0,
        }
        self.mutations = {status.value: 0 for status in MutationStatus}
        self._outcomes = []

    def add_result(self, result: ReconciliationResult):
        # A group reconciled again keeps its counts, status reflects the last run
        group = self.groups.setdefault(result.group_id, {
            "runs": 0,
            **{status.value: 0 for status in MutationStatus},
        })
        group["runs"] += 1
        group["status"] = result.status.value
        group["error"] = str(result.error) if result.error is not None else None
        group["cancelled"] = result.cancelled
        for status, count in result.counts().items():
            group[status] += count
        self.totals["reconciled"] += 1
        if result.error is not None:
            self.totals["failed"] += 1
        for status, count in result.counts().items():
            self.mutations[status] += count
        for outcome in result.outcomes.values():
            self._outcomes.append({"group_id": result.group_id, **outcome.to_dict()})

    def as_dict(self):
        return {
            "groups": self.groups,
            "totals": self.totals,
            "mutations": self.mutations,
        }

    def print(self):
        print("------ Stats ------")
        print()
        pprint(self.as_dict(), depth=4, sort_dicts=False)

    def _stats_file(self, prefix, extension, stats_dir):
        if not os.path.exists(stats_dir):
            os.makedirs(stats_dir)
        return os.path.join(stats_dir, f'{prefix}_stats.{extension}')

    def save(self, prefix: str = '', stats_dir: str = './stats'):
        stats_file = self._stats_file(prefix, 'json', stats_dir)
        with open(stats_file, 'w') as f:
            json.dump(self.as_dict(), f, indent=4)
        return stats_file

    def save_xlsx(self, prefix: str = '', stats_dir: str = './stats'):
        stats_file = self._stats_file(prefix, 'xlsx', stats_dir)

        summary = pd.DataFrame(
            [{"Group": group_id, **data} for group_id, data in self.groups.items()],
            columns=["Group", "runs", "status", "error", "cancelled"] + [s.value for s in MutationStatus],
        )
        outcomes = pd.DataFrame(
            self._outcomes,
            columns=["group_id", "member_id", "kind", "status", "reason"],
        )

        with pd.ExcelWriter(stats_file, engine='openpyxl') as writer:
            summary.to_excel(writer, index=False, sheet_name='Groups')
            outcomes.to_excel(writer, index=False, sheet_name='Mutations')
        return stats_file
