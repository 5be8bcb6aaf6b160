"""
Worker module.
Contains the polling worker loop and the job handler registry.
"""

from redqueue.worker.handlers import execute_job, register_handler
from redqueue.worker.main import Worker, run

__all__ = ["Worker", "run", "execute_job", "register_handler"]
