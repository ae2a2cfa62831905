"""Install orchestration and the I/O collaborators it drives.

- orchestrator.py: probe/decide/resolve/finalize state machine and uninstall
- host.py: existing global/local install detection
- archive.py, bin_scripts.py, companions.py: extraction, entry points, npm/Yarn
- locking.py: per-target exclusive lock
- errors.py: exception hierarchy
"""
