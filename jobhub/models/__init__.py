from jobhub.models.job import CATEGORIES, DEFAULT_CATEGORY, Job

__all__ = ["CATEGORIES", "DEFAULT_CATEGORY", "Job"]
