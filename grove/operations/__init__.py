"""High-level Grove operations.

- Staging files (add)
- Creating commits
- Status and diff computation
- History traversal (log)
"""

from grove.operations.add import AddResult, stage_paths
from grove.operations.commit import CommitResult, create_commit
from grove.operations.diff import DiffEngine, DiffResult, FileDiff, DiffChunk, DiffLine
from grove.operations.log import LogEntry, LogResult, log, walk_commits
from grove.operations.status import StatusResult, compute_status

__all__ = [
    'AddResult', 'stage_paths',
    'CommitResult', 'create_commit',
    'DiffEngine', 'DiffResult', 'FileDiff', 'DiffChunk', 'DiffLine',
    'LogEntry', 'LogResult', 'log', 'walk_commits',
    'StatusResult', 'compute_status',
]
