"""
Tests for seeding content from JSON files
"""
import json

from sqlalchemy.exc import IntegrityError

from conftest import article_payload, project_payload
from portfolio import seed as seed_module
from portfolio.content.api import get_resume, list_articles, list_projects
from portfolio.seed import main, seed


def write_seed(directory, **files):
    for name, documents in files.items():
        (directory / f"{name}.json").write_text(json.dumps(documents), encoding="utf-8")


def test_seed_loads_every_collection(store, tmp_path):
    write_seed(
        tmp_path,
        projects=[project_payload(), project_payload(slug="second", title="Second")],
        articles=[article_payload()],
        resume={"summary": "Engineer", "skills": ["Python"]},
    )

    counts = seed(store, str(tmp_path))

    assert counts == {"projects": 2, "articles": 1, "resume": 1}
    assert [p["slug"] for p in list_projects(store)] == ["second", "ledger-service"]
    assert list_articles(store)[0]["slug"] == "scaling-reads"
    assert get_resume(store)["summary"] == "Engineer"


def test_reseeding_updates_in_place(store, tmp_path):
    write_seed(tmp_path, projects=[project_payload()])
    seed(store, str(tmp_path))

    write_seed(tmp_path, projects=[project_payload(title="Ledger Service v2")])
    seed(store, str(tmp_path))

    projects = list_projects(store)
    assert len(projects) == 1
    assert projects[0]["title"] == "Ledger Service v2"


def test_missing_files_are_skipped(store, tmp_path):
    assert seed(store, str(tmp_path)) == {"projects": 0, "articles": 0, "resume": 0}


def test_main_rejects_invalid_documents(tmp_path):
    write_seed(tmp_path, projects=[{"slug": "no-title"}])
    database_url = f"sqlite:///{tmp_path}/seed.db"

    assert main([str(tmp_path), "--database-url", database_url]) == 1


def test_main_seeds_database_file(tmp_path):
    write_seed(tmp_path, articles=[article_payload()])
    database_url = f"sqlite:///{tmp_path}/seed.db"

    assert main([str(tmp_path), "--database-url", database_url]) == 0


def test_main_reports_store_rejection(tmp_path, monkeypatch):
    def reject(**kwargs):
        raise IntegrityError("INSERT INTO projects", {}, Exception("UNIQUE constraint failed"))

    monkeypatch.setattr(seed_module, "atomic_upsert", reject)
    write_seed(tmp_path, projects=[project_payload()])
    database_url = f"sqlite:///{tmp_path}/seed.db"

    assert main([str(tmp_path), "--database-url", database_url]) == 1
