"""
Task subsystem.

Components:
- task_models.py: data structures (Task, DeletedTask, TaskDraft, Tab)
- task_api.py: async HTTP client for the remote task service
- trash.py: locally persisted soft-deleted tasks
- autosave.py: debounced saving of the task open in the editor
- selection.py: selected ids for batch actions
- projection.py: filtered / sorted / highlighted view of the list
- controller.py: orchestration of all of the above
"""
