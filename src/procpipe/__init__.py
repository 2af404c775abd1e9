"""procpipe - describe and run shell-style process pipelines."""

from procpipe.errors import (
    ConfigurationError,
    ParseError,
    PipelineError,
    PipelineFailedError,
    PipelineIOError,
    PipelinePhase,
    SpawnError,
)
from procpipe.parser import PIPE, parse_pipeline, split_stages
from procpipe.runtime import (
    ExitStatus,
    Pipeline,
    PipelineEvent,
    PipelineOutput,
    cmd,
)
from procpipe.stage import Stage

__version__ = "0.1.0"

__all__ = [
    "PIPE",
    "ConfigurationError",
    "ExitStatus",
    "ParseError",
    "Pipeline",
    "PipelineError",
    "PipelineEvent",
    "PipelineFailedError",
    "PipelineIOError",
    "PipelineOutput",
    "PipelinePhase",
    "SpawnError",
    "Stage",
    "cmd",
    "parse_pipeline",
    "split_stages",
]
