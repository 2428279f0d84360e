"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter, TaskStats) and date parsing
- task_store.py: JSON file storage
- task_manager.py: in-memory collection with add/update/filter/search/stats
"""
