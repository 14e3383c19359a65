"""Application layer - use cases and job configuration."""

from cutlist.application.commands import JobOutput, JobOverrides, PackJobCommand

__all__ = ["JobOutput", "JobOverrides", "PackJobCommand"]
