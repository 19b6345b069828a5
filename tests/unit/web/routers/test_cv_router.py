"""Tests for the CV router."""


def test_ingest_cv(client, sample_cv, in_memory_vector_store):
    response = client.post("/api/cv", json=sample_cv)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["documentId"] == "cv-main"
    assert in_memory_vector_store.get_document("cv-main").type == "cv"


def test_reposting_cv_replaces_it(client, sample_cv, in_memory_vector_store):
    client.post("/api/cv", json=sample_cv)
    result = client.post("/api/cv", json=sample_cv).json()

    assert len(in_memory_vector_store.records) == 1
    assert len(in_memory_vector_store.chunks_for("cv-main")) == result["chunkCount"]


def test_missing_body(client):
    response = client.post("/api/cv")

    assert response.status_code == 400
    assert response.json()["detail"] == "CV data is required"


def test_empty_object(client):
    assert client.post("/api/cv", json={}).status_code == 400


def test_invalid_cv(client, in_memory_vector_store):
    response = client.post("/api/cv", json={"personalInfo": {"name": "Only a name"}})

    assert response.status_code == 400
    assert response.json()["errorType"] == "ValidationError"
    assert in_memory_vector_store.records == {}
