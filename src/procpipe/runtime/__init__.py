"""Runtime that turns stage descriptions into live process pipelines."""

from procpipe.runtime.pipeline import Pipeline, cmd
from procpipe.runtime.results import ExitStatus, PipelineEvent, PipelineOutput

__all__ = [
    "ExitStatus",
    "Pipeline",
    "PipelineEvent",
    "PipelineOutput",
    "cmd",
]
