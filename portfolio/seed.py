"""
Seed the content collections from JSON files

Usage:
    portfolio-seed content/

Reads projects.json and articles.json (lists of documents) and
resume.json (one document) from the directory. Projects and articles are
upserted by slug, so re-running the seed updates in place.
"""
import argparse
import json
import logging
import os
import sys
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from portfolio.articles.models import Article
from portfolio.articles.schemas import ArticleCreate
from portfolio.projects.models import Project
from portfolio.projects.schemas import ProjectCreate
from portfolio.resume.main import save_resume
from portfolio.resume.schemas import ResumeDocument
from portfolio.shared import config
from portfolio.shared.database import DocumentStore
from portfolio.shared.errors import StoreUnavailable
from portfolio.shared.upsert import atomic_upsert

logger = logging.getLogger(__name__)


def _load(directory: str, filename: str):
    path = os.path.join(directory, filename)
    if not os.path.exists(path):
        logger.info(f"{filename} not found, skipping")
        return None
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _seed_collection(db, model, schema, documents: list) -> int:
    count = 0
    for raw in documents:
        document = schema.model_validate(raw).model_dump()
        slug = document.pop("slug")
        atomic_upsert(
            db=db,
            model=model,
            unique_field="slug",
            unique_value=slug,
            update_data=document,
        )
        count += 1
    return count


def seed(store: DocumentStore, directory: str) -> dict:
    """Load every seed file present in ``directory``. Returns counts per collection."""
    counts = {"projects": 0, "articles": 0, "resume": 0}

    with store.session() as db:
        try:
            projects = _load(directory, "projects.json")
            if projects:
                counts["projects"] = _seed_collection(db, Project, ProjectCreate, projects)

            articles = _load(directory, "articles.json")
            if articles:
                counts["articles"] = _seed_collection(db, Article, ArticleCreate, articles)

            resume = _load(directory, "resume.json")
            if resume:
                save_resume(db, ResumeDocument.model_validate(resume))
                counts["resume"] = 1

            db.commit()
        except Exception:
            db.rollback()
            raise

    logger.info(
        f"Seeded {counts['projects']} projects, {counts['articles']} articles, "
        f"{counts['resume']} resume"
    )
    return counts


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Seed portfolio content from JSON files")
    parser.add_argument("directory", help="directory containing projects.json, articles.json, resume.json")
    parser.add_argument("--database-url", default=None, help="overrides DATABASE_URL")
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL)

    store = DocumentStore(args.database_url)
    try:
        seed(store, args.directory)
    except (ValidationError, ValueError) as e:
        logger.error(f"Invalid seed data: {e}")
        return 1
    except (StoreUnavailable, SQLAlchemyError) as e:
        logger.error(f"Seeding failed: {e}")
        return 1
    finally:
        store.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
