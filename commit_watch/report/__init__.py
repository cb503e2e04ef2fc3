from .publisher import ARTIFACT_FILES, PublishedArtifact, ReportPublisher, report_url

__all__ = ["ARTIFACT_FILES", "PublishedArtifact", "ReportPublisher", "report_url"]
