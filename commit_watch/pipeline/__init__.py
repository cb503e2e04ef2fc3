from .stages import (
    CheckoutStage,
    CommitPipeline,
    FormatGateStage,
    NotifyOrMarkStage,
    PublishStage,
    Stage,
    StageContext,
    TestGateStage,
    default_stages,
)
from .watcher import Watcher, build_watcher

__all__ = [
    "CheckoutStage",
    "CommitPipeline",
    "FormatGateStage",
    "NotifyOrMarkStage",
    "PublishStage",
    "Stage",
    "StageContext",
    "TestGateStage",
    "default_stages",
    "Watcher",
    "build_watcher",
]
