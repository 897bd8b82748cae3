from pipeline.clusterer import cluster_articles
from pipeline.ingest import ingest_articles
from pipeline.orchestrator import PipelineRunner, trigger_pipeline_run
from pipeline.scheduler import PipelineScheduler, start_scheduler, stop_scheduler
from pipeline.synthesizer import synthesize_story

__all__ = [
    "cluster_articles",
    "ingest_articles",
    "PipelineRunner",
    "trigger_pipeline_run",
    "PipelineScheduler",
    "start_scheduler",
    "stop_scheduler",
    "synthesize_story",
]
