"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Groups hashed file records into duplicate groups.

Precedence is the input order: the first record seen for a digest becomes the
group's original. No secondary sort by path or mtime is applied.
"""

from typing import List, Dict, Any, Callable
from collections import defaultdict
from quarantiner.core.interfaces import FileGrouper
from quarantiner.core.models import FileRecord, DuplicateGroup, FileState


class FileGrouperImpl(FileGrouper):

    def group(self, records: List[FileRecord]) -> List[DuplicateGroup]:
        """Duplicate groups in order of each digest's first appearance."""
        return [
            DuplicateGroup(digest=digest, files=files)
            for digest, files in self.group_by_digest(records).items()
        ]

    @staticmethod
    def classify(records: List[FileRecord], groups: List[DuplicateGroup]) -> Dict[str, FileState]:
        """
        State of every scanned record once grouping is done, keyed by path.
        Records outside any group are UNIQUE and need no action.
        """
        states = {record.path: FileState.UNIQUE for record in records}
        for group in groups:
            for record in group.files:
                states[record.path] = group.state_of(record)
        return states

    def group_by_digest(self, records: List[FileRecord]) -> Dict[str, List[FileRecord]]:
        """Groups records by content digest."""
        return self._group_by(records, lambda r: r.digest)

    @staticmethod
    def _group_by(records: List[FileRecord], key_func: Callable[[FileRecord], Any]) -> Dict[Any, List[FileRecord]]:
        """
        Helper method to group records by any computed key.
        Args:
            records: Records to group, in discovery order
            key_func: Function that computes a hashable key from a FileRecord
        Returns:
            Dict[key, List[FileRecord]] with only the keys shared by 2+ records
        """
        groups = defaultdict(list)
        for record in records:
            groups[key_func(record)].append(record)

        # dict preserves insertion order, and so does each list
        return {key: group for key, group in groups.items() if len(group) >= 2}
