"""JobHub dashboard core.

- `normalize.py` coerces raw API records into the `Job` schema.
- `storage.py` persists locally authored jobs and applications.
- `merge.py`, `query.py` and `urlstate.py` derive the dashboard view.
- `controller.py` owns the state and is what the UI talks to.
"""
