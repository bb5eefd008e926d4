"""taskcollab — client for a group/task collaboration service.

Tasks are versioned records shared between users.  Edits go through
``taskcollab.conflict.ConflictResolutionController``, which sends each edit
with the version it was made against and lets the user resolve conflicts
when someone else wrote first.
"""

__version__ = "0.1.0"
