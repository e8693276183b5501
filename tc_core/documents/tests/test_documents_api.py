import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from rest_framework.test import APIClient

from tc_core.conftest import client_for, make_user
from tc_core.courses.services import EnrollmentService
from tc_core.documents.models import UserDocument
from tc_core.groups.models import GroupMembership

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def catalogue(db):
    call_command("seed_document_types")


def _pdf(name="scan.pdf"):
    return SimpleUploadedFile(name, b"%PDF-1.4 test", content_type="application/pdf")


def test_documents_require_authentication():
    assert APIClient().get("/api/documents/").status_code == 401


def test_document_types_are_listed(student):
    res = client_for(student).get("/api/documents/types/")

    assert res.status_code == 200
    assert "DiplomaCopy" in [t["name"] for t in res.json()]


def test_student_uploads_and_lists_own_documents(student):
    client = client_for(student)

    res = client.post(
        "/api/documents/",
        {"files": [_pdf("diploma.pdf"), _pdf("license.pdf")], "docTypeNames": ["DiplomaCopy", "DriverLicense"]},
        format="multipart",
    )

    assert res.status_code == 201
    assert {d["documentType"] for d in res.json()["documents"]} == {"DiplomaCopy", "DriverLicense"}

    listing = client.get("/api/documents/")
    assert len(listing.json()["documents"]) == 2
    assert listing.json()["documents"][0]["documentUrl"].startswith("http://testserver/")


def test_student_cannot_upload_for_someone_else(student):
    other = make_user("other@tc.test")

    res = client_for(student).post(
        "/api/documents/",
        {"userId": other.id, "files": [_pdf()], "docTypeNames": ["DiplomaCopy"]},
        format="multipart",
    )

    assert res.status_code == 403
    assert not UserDocument.objects.exists()


def test_staff_uploads_for_a_participant(office_user, student):
    res = client_for(office_user).post(
        "/api/documents/",
        {"userId": student.id, "files": [_pdf()], "docTypeNames": ["DiplomaCopy"]},
        format="multipart",
    )

    assert res.status_code == 201
    assert UserDocument.objects.get().user_id == student.id


def test_delete_is_a_soft_delete(student):
    client = client_for(student)
    doc_id = client.post(
        "/api/documents/", {"files": [_pdf()], "docTypeNames": ["DiplomaCopy"]}, format="multipart"
    ).json()["documents"][0]["id"]

    res = client.delete(f"/api/documents/{doc_id}/")

    assert res.status_code == 204
    assert UserDocument.objects.get(id=doc_id).is_active is False
    assert client.get("/api/documents/").json()["documents"] == []


def test_missing_documents_endpoint(student, course):
    EnrollmentService.enroll(user_id=student.id, course_id=course.id)

    own = client_for(student).get(f"/api/documents/missing/{student.id}/")
    foreign = client_for(make_user("nosy@tc.test")).get(f"/api/documents/missing/{student.id}/")

    assert own.status_code == 200
    assert own.json()["hasAllRequiredDocuments"] is False
    assert len(own.json()["missingDocumentTypes"]) == 5
    assert foreign.status_code == 403


def test_group_document_status_for_instructor(group, student):
    GroupMembership.objects.create(group=group, user=student)
    instructor = make_user("instructor@tc.test", roles=["INSTRUCTOR"])

    res = client_for(instructor).get(f"/api/groups/{group.id}/document-status/")

    assert res.status_code == 200
    assert res.json()["summary"]["totalUsers"] == 1
    assert res.json()["users"][0]["status"] == "unknown"
