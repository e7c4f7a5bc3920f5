"""
Job Filtering

Narrows an in-memory job list to the listings matching a FilterCriteria.

Predicates are AND-combined and applied in a fixed order (keyword, location,
job type, experience level, salary floor, salary ceiling, remote). Each stage
only sees the survivors of the previous one, so the cheap, most selective
text predicates run first. Unset criteria impose no constraint.

The result is a new list that preserves the input order; the input is never
mutated. An empty result is a normal outcome ("no matches").

Usage:
    from src.common.job_filtering import filter_jobs

    matches = filter_jobs(jobs, FilterCriteria(keyword="python", remote=True))
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from src.common.types import FilterCriteria, Job

logger = logging.getLogger(__name__)

JobPredicate = Callable[[Job], bool]


def _contains(haystack: Optional[str], needle_lower: str) -> bool:
    return needle_lower in (haystack or "").lower()


def matches_keyword(job: Job, keyword: str) -> bool:
    """Case-insensitive substring match on title, company or description."""
    needle = keyword.lower()
    return (
        _contains(job.title, needle)
        or _contains(job.company, needle)
        or _contains(job.description, needle)
    )


def matches_location(job: Job, location: str) -> bool:
    """Case-insensitive substring match on the location field."""
    return _contains(job.location, location.lower())


def meets_salary_floor(job: Job, salary_min: int) -> bool:
    """A job with no advertised maximum is never excluded by a floor."""
    return job.salary_max is None or job.salary_max >= salary_min


def meets_salary_ceiling(job: Job, salary_max: int) -> bool:
    """A job with no advertised minimum is never excluded by a ceiling."""
    return job.salary_min is None or job.salary_min <= salary_max


def build_predicates(criteria: FilterCriteria) -> List[Tuple[str, JobPredicate]]:
    """
    Turn criteria into an ordered list of (stage name, predicate).

    Only constrained dimensions produce a predicate, so empty criteria
    yield an empty list.
    """
    stages: List[Tuple[str, JobPredicate]] = []

    if criteria.keyword:
        keyword = criteria.keyword
        stages.append((f"keyword '{keyword}'", lambda job: matches_keyword(job, keyword)))

    if criteria.location:
        location = criteria.location
        stages.append((f"location '{location}'", lambda job: matches_location(job, location)))

    if criteria.job_type:
        job_types = frozenset(criteria.job_type)
        stages.append(("job type", lambda job: job.job_type in job_types))

    if criteria.experience_level:
        levels = frozenset(criteria.experience_level)
        stages.append(("experience level", lambda job: job.experience_level in levels))

    if criteria.salary_min is not None:
        floor = criteria.salary_min
        stages.append(("min salary", lambda job: meets_salary_floor(job, floor)))

    if criteria.salary_max is not None:
        ceiling = criteria.salary_max
        stages.append(("max salary", lambda job: meets_salary_ceiling(job, ceiling)))

    if criteria.remote:
        stages.append(("remote", lambda job: job.remote))

    return stages


def filter_jobs(jobs: Sequence[Job], criteria: Optional[FilterCriteria] = None) -> List[Job]:
    """
    Return the jobs satisfying every constrained dimension of ``criteria``.

    Args:
        jobs: Full job list, in display order
        criteria: Filter criteria (None behaves like empty criteria)

    Returns:
        New list, an order-preserving subsequence of ``jobs``
    """
    results = list(jobs)
    if criteria is None:
        return results

    logger.debug(f"Filtering {len(results)} jobs")
    for stage_name, predicate in build_predicates(criteria):
        results = [job for job in results if predicate(job)]
        logger.debug(f"After {stage_name} filter: {len(results)}")
        if not results:
            break

    return results
