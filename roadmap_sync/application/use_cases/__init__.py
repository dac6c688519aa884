from roadmap_sync.application.use_cases.sync_roadmap import RoadmapSyncUseCase

__all__ = ["RoadmapSyncUseCase"]
