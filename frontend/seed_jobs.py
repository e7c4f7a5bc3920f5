"""
Seed script to populate sample jobs for demo purposes.

Usage:
    python -m frontend.seed_jobs              # Add 20 sample jobs
    python -m frontend.seed_jobs --count 50   # Add 50 sample jobs
    python -m frontend.seed_jobs --clear      # Clear all jobs first, then seed
"""

import argparse
import random
import uuid
from datetime import datetime, timedelta
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

from src.common.repositories import get_job_repository, get_profile_repository, get_saved_job_repository
from src.common.types import ExperienceLevel, Job, JobType

# Sample data for generating realistic job listings
COMPANIES = [
    "TechCorp Inc.", "DataFlow Systems", "Creative Solutions", "Analytics Pro",
    "CloudTech Solutions", "InnovateTech", "AppGenius", "Quality Systems",
    "DocuTech", "Growth Hackers", "Stripe", "Figma", "Notion", "Datadog",
]

ROLES = [
    "Frontend Developer",
    "Backend Engineer",
    "UX/UI Designer",
    "Data Scientist",
    "DevOps Engineer",
    "Product Manager",
    "Mobile Developer (iOS)",
    "QA Engineer",
    "Technical Writer",
    "Marketing Specialist",
    "Site Reliability Engineer",
    "Full Stack Engineer",
]

LOCATIONS = [
    "San Francisco, CA",
    "New York, NY",
    "Seattle, WA",
    "Austin, TX",
    "Boston, MA",
    "Los Angeles, CA",
    "Chicago, IL",
    "Denver, CO",
    "Portland, OR",
    "Miami, FL",
    "London, UK",
    "Berlin, Germany",
]

# Salary bands by level, in USD
SALARY_BANDS = {
    ExperienceLevel.ENTRY: (50000, 90000),
    ExperienceLevel.MID: (80000, 140000),
    ExperienceLevel.SENIOR: (120000, 200000),
}


def generate_salary(level: ExperienceLevel) -> tuple:
    """Salary range for a level; some jobs omit one or both bounds."""
    low, high = SALARY_BANDS[level]
    salary_min: Optional[int] = random.randrange(low, (low + high) // 2, 5000)
    salary_max: Optional[int] = random.randrange((low + high) // 2, high + 1, 5000)
    shape = random.random()
    if shape < 0.1:
        return None, None
    if shape < 0.2:
        return salary_min, None
    return salary_min, salary_max


def generate_sample_job() -> Job:
    """Generate a single sample job."""
    company = random.choice(COMPANIES)
    role = random.choice(ROLES)
    level = random.choice(list(ExperienceLevel))
    salary_min, salary_max = generate_salary(level)

    # Random date in the last 30 days
    days_ago = random.randint(0, 30)

    return Job(
        id=str(uuid.uuid4()),
        title=role,
        company=company,
        location=random.choice(LOCATIONS),
        job_type=random.choice([JobType.FULL_TIME] * 3 + list(JobType)),  # Weighted toward full-time
        experience_level=level,
        remote=random.random() < 0.3,
        salary_min=salary_min,
        salary_max=salary_max,
        description=f"We are looking for a {role} to join our team at {company}. "
                    f"This is an exciting opportunity to work on challenging problems.",
        posted_at=datetime.utcnow() - timedelta(days=days_ago),
        source="seed_script",
    )


def seed_jobs(count: int = 20, clear: bool = False) -> None:
    """
    Seed the jobs collection with sample jobs.

    Args:
        count: Number of jobs to create
        clear: If True, delete existing jobs first
    """
    repo = get_job_repository()
    for indexed in (repo, get_saved_job_repository(), get_profile_repository()):
        indexed.ensure_indexes()

    if clear:
        existing = repo.find_all()
        for doc in existing:
            repo.delete_one(doc["_id"])
        print(f"Cleared {len(existing)} existing jobs")

    jobs = [generate_sample_job() for _ in range(count)]
    result = repo.insert_many([job.to_document() for job in jobs])
    print(f"Inserted {result.modified_count} sample jobs")

    # Show sample
    print("\nSample jobs:")
    for job in jobs[:3]:
        print(f"  - {job.company}: {job.title} ({job.location}, {job.job_type.value})")

    print(f"\nTotal jobs: {len(repo.find_all())}")


def main():
    parser = argparse.ArgumentParser(description="Seed sample jobs for demo")
    parser.add_argument("--count", type=int, default=20, help="Number of jobs to create")
    parser.add_argument("--clear", action="store_true", help="Clear existing jobs first")

    args = parser.parse_args()

    seed_jobs(count=args.count, clear=args.clear)


if __name__ == "__main__":
    main()
