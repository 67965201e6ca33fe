"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskInput, TaskStats) + record codec
- ids.py: task id generators and the startup strategy choice
- task_store.py: CRUD over one JSON array kept under a single storage key
- session.py: in-memory mirror + load status + stats for the console
"""
