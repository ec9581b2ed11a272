"""Tests for the jobs, programs, featured and user-location endpoints."""

from sqlmodel import Session

from tests.conftest import auth_header, test_engine
from skillstrong.models.listings import Job, Program
from skillstrong.models.profile import UserProfile


def _seed(*rows):
    with Session(test_engine) as session:
        for row in rows:
            session.add(row)
        session.commit()
        return [row.id for row in rows]


# --- Jobs ---

def test_create_and_list_jobs(client):
    body = {"title": "CNC Operator", "company": "Acme", "location": "Cleveland, OH", "skills": ["CNC", "GD&T"]}
    response = client.post("/api/jobs", json=body)
    assert response.status_code == 200
    assert response.json()["job"]["id"]

    jobs = client.get("/api/jobs").json()["jobs"]
    assert [j["title"] for j in jobs] == ["CNC Operator"]
    assert jobs[0]["skills"] == ["CNC", "GD&T"]


def test_create_job_requires_fields(client):
    response = client.post("/api/jobs", json={"title": "CNC Operator"})
    assert response.status_code == 400


def test_job_filters(client):
    _seed(
        Job(title="CNC Machinist", company="Acme", location="Cleveland, OH", pay_min=20, pay_max=28, skills=["CNC"]),
        Job(title="Welder", company="Lincoln", location="Euclid, OH", pay_min=24, pay_max=32, apprenticeship=True, skills=["MIG"]),
        Job(title="Robotics Tech", company="Fanuc", location="Detroit, MI", pay_min=30, pay_max=40),
    )

    def titles(**params):
        return [j["title"] for j in client.get("/api/jobs", params=params).json()["jobs"]]

    assert titles(q="welder lincoln") == ["Welder"]
    assert set(titles(state="OH")) == {"CNC Machinist", "Welder"}
    assert titles(city="Detroit") == ["Robotics Tech"]
    assert titles(skills="mig") == ["Welder"]
    assert titles(apprenticeship="true") == ["Welder"]
    assert set(titles(pay_min=29)) == {"Welder", "Robotics Tech"}
    assert titles(pay_max=21) == ["CNC Machinist"]


def test_featured_jobs_sort_first(client):
    _seed(
        Job(title="Featured Welder", company="A", location="Akron, OH", featured=True),
        Job(title="Regular Welder", company="B", location="Akron, OH"),
    )
    jobs = client.get("/api/jobs").json()["jobs"]
    assert jobs[0]["title"] == "Featured Welder"


def test_get_job_not_found(client):
    assert client.get("/api/jobs/9999").status_code == 404


def test_job_trends(client):
    _seed(
        Job(title="Welder", company="A", location="Akron, OH", skills=["MIG", "TIG"]),
        Job(title="Welder", company="B", location="Akron, OH", skills=["MIG"]),
        Job(title="Machinist", company="C", location="Dayton, OH", skills=["CNC"]),
    )
    trends = client.get("/api/jobs/trends").json()
    assert trends["job_titles"][0] == "Welder"
    assert trends["popular_cities"][0] == "Akron, OH"
    assert trends["in_demand_skills"][0] == "MIG"


# --- Programs ---

def test_programs_pagination_and_count(client):
    _seed(*[Program(school=f"School {i}", title="Welding Certificate", location="Akron, OH") for i in range(5)])
    data = client.get("/api/programs", params={"page": 2, "limit": 2}).json()
    assert data["count"] == 5
    assert data["page"] == 2
    assert data["limit"] == 2
    assert [p["school"] for p in data["programs"]] == ["School 2", "School 3"]


def test_program_filters(client):
    _seed(
        Program(school="Tri-C", title="CNC Certificate", location="Cleveland, OH", length_weeks=16, cost=3000, url="https://tri-c.edu"),
        Program(school="Laney College", title="Machine Technology", location="Oakland, CA", delivery="hybrid", length_weeks=40, cost=1500),
        Program(school="Online U", title="Quality Basics", location="Remote", delivery="online", length_weeks=6, cost=500),
    )

    def schools(**params):
        return [p["school"] for p in client.get("/api/programs", params=params).json()["programs"]]

    assert schools(q="cnc") == ["Tri-C"]
    assert schools(metro="Bay Area, CA") == ["Laney College"]
    assert schools(delivery="online") == ["Online U"]
    assert schools(max_weeks=20) == ["Online U", "Tri-C"]
    assert schools(max_cost=1000) == ["Online U"]
    assert schools(require_url="true") == ["Tri-C"]


def test_program_metros(client):
    _seed(
        Program(school="Tri-C", title="CNC", location="Cleveland, OH"),
        Program(school="Somewhere", title="CNC", location="Nowhere, ZZ"),
    )
    assert client.get("/api/programs/metros").json() == {"metros": ["Cleveland, OH"]}


def test_program_trends(client):
    _seed(
        Program(school="Tri-C", title="Welding Certificate", location="Cleveland, OH", length_weeks=16),
        Program(school="Lorain CC", title="Welding Certificate", location="Cleveland, OH", length_weeks=16),
        Program(school="Sinclair", title="CNC Machining", location="Dayton, OH", length_weeks=30),
        Program(school="Untitled", title="  ", location="Dayton, OH"),
    )
    response = client.get("/api/programs/trends")
    assert response.status_code == 200
    trends = response.json()
    assert trends["trending_programs"] == ["Welding Certificate", "CNC Machining"]
    assert trends["popular_locations"][0] == "Cleveland, OH"
    assert trends["common_durations"] == ["16 weeks", "30 weeks"]


def test_create_program_validates_delivery(client):
    body = {"school": "Tri-C", "title": "CNC", "location": "Cleveland, OH", "delivery": "carrier pigeon"}
    assert client.post("/api/programs", json=body).status_code == 400
    body["delivery"] = "hybrid"
    assert client.post("/api/programs", json=body).json()["program"]["delivery"] == "hybrid"


# --- Featured ---

def test_featured_roundtrip(client):
    (job_id,) = _seed(Job(title="Welder", company="Lincoln", location="Euclid, OH"))
    response = client.post("/api/featured", json={"kind": "job", "ref_id": job_id, "category_hint": "weld"})
    assert response.status_code == 200

    items = client.get("/api/featured", params={"kind": "job"}).json()["featured"]
    assert items[0]["item"]["title"] == "Welder"
    assert client.get("/api/featured", params={"kind": "program"}).json()["featured"] == []


def test_featured_requires_existing_target(client):
    response = client.post("/api/featured", json={"kind": "program", "ref_id": 404})
    assert response.status_code == 404


# --- User location ---

def test_update_location_requires_auth(client):
    assert client.post("/api/user/location", json={"location": "44114"}).status_code == 401


def test_update_location_upserts_profile(client):
    for location in ("44114", "Cleveland, OH"):
        response = client.post("/api/user/location", json={"location": location}, headers=auth_header())
        assert response.status_code == 200

    with Session(test_engine) as session:
        assert session.get(UserProfile, "user-1").zip_code == "Cleveland, OH"


def test_update_location_rejects_blank(client):
    response = client.post("/api/user/location", json={"location": "  "}, headers=auth_header())
    assert response.status_code == 400
