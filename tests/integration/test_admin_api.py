"""Integration tests for the /api/admin endpoints."""

import pytest

from factories import PASSWORD, bearer, create_member, create_school
from schoolbase.domain.entities import Role

USERS = "/api/admin/users"
SUBJECTS = "/api/admin/subjects"
EXAMS = "/api/admin/exams"


def new_user(email: str, role: str, **fields) -> dict:
    return {"email": email, "password": PASSWORD, "role": role, **fields}


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_admin_creates_student_with_generated_id(self, client, school):
        response = await client.post(
            USERS,
            json=new_user("kid@greenfield.test", "STUDENT", firstName="Tobi", studentClass="JSS2"),
            headers=bearer(school["admin_token"]),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["role"] == "STUDENT"
        assert body["schoolId"] == school["id"]
        assert body["studentClass"] == "JSS2"
        assert body["studentId"].startswith(school["school_number"])
        assert len(body["studentId"]) == 10
        assert "passwordHash" not in body

    @pytest.mark.asyncio
    async def test_admin_creates_teacher_with_subjects(self, client, school):
        response = await client.post(
            USERS,
            json=new_user("t@greenfield.test", "TEACHER", subjects=["Mathematics", "Physics"]),
            headers=bearer(school["admin_token"]),
        )

        assert response.status_code == 201
        assert response.json()["subjects"] == ["Mathematics", "Physics"]
        assert response.json()["studentId"] is None

    @pytest.mark.asyncio
    async def test_admin_school_id_in_body_is_ignored(self, client, db_session, school):
        other = await create_school(db_session, name="Other", admin_email="a@other.test")

        response = await client.post(
            USERS,
            json=new_user("t@greenfield.test", "TEACHER", schoolId=other["id"]),
            headers=bearer(school["admin_token"]),
        )

        assert response.status_code == 201
        assert response.json()["schoolId"] == school["id"]

    @pytest.mark.asyncio
    async def test_superadmin_names_the_school(self, client, superadmin, school):
        response = await client.post(
            USERS,
            json=new_user("t@greenfield.test", "TEACHER", schoolId=school["id"]),
            headers=bearer(superadmin["token"]),
        )

        assert response.status_code == 201
        assert response.json()["schoolId"] == school["id"]

    @pytest.mark.asyncio
    async def test_superadmin_without_school_id(self, client, superadmin):
        response = await client.post(
            USERS,
            json=new_user("t@greenfield.test", "TEACHER"),
            headers=bearer(superadmin["token"]),
        )

        assert response.status_code == 400
        assert response.json() == {"error": "School ID is required"}

    @pytest.mark.asyncio
    async def test_teacher_limit(self, client, db_session):
        school = await create_school(db_session, max_teachers=1)
        headers = bearer(school["admin_token"])

        first = await client.post(USERS, json=new_user("t1@x.test", "TEACHER"), headers=headers)
        second = await client.post(USERS, json=new_user("t2@x.test", "TEACHER"), headers=headers)

        assert first.status_code == 201
        assert second.status_code == 400
        assert second.json() == {"error": "Teacher limit reached"}

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client, school):
        headers = bearer(school["admin_token"])
        await client.post(USERS, json=new_user("t@x.test", "TEACHER"), headers=headers)

        response = await client.post(USERS, json=new_user("t@x.test", "STUDENT"), headers=headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Email already exists", "field": "email"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["SUPERADMIN", "PRINCIPAL"])
    async def test_invalid_role(self, client, school, role):
        response = await client.post(
            USERS, json=new_user("x@x.test", role), headers=bearer(school["admin_token"])
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid role"}

    @pytest.mark.asyncio
    async def test_teacher_cannot_create_users(self, client, db_session, school):
        teacher = await create_member(db_session, school, Role.TEACHER, "t@greenfield.test")

        response = await client.post(
            USERS, json=new_user("x@x.test", "STUDENT"), headers=bearer(teacher["token"])
        )

        assert response.status_code == 403


class TestBulkCreate:
    @pytest.mark.asyncio
    async def test_rows_are_reported_individually(self, client, school):
        rows = [
            {"email": "a@x.test", "password": "p", "firstName": "A", "lastName": "One", "studentClass": "SS1"},
            {"email": "b@x.test", "password": "p", "firstName": "B", "lastName": "Two"},
        ]

        response = await client.post(
            f"{USERS}/bulk", json={"students": rows}, headers=bearer(school["admin_token"])
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Processed 2 students"
        assert body["successCount"] == 1
        assert body["failureCount"] == 1
        assert body["created"][0]["email"] == "a@x.test"
        assert body["created"][0]["studentId"].startswith(school["school_number"])
        assert body["errors"] == [{"email": "b@x.test", "error": "Missing required fields"}]

    @pytest.mark.asyncio
    async def test_empty_batch(self, client, school):
        response = await client.post(
            f"{USERS}/bulk", json={"students": []}, headers=bearer(school["admin_token"])
        )

        assert response.status_code == 400
        assert response.json() == {"error": "No students provided"}

    @pytest.mark.asyncio
    async def test_batch_over_capacity_creates_nothing(self, client, db_session):
        school = await create_school(db_session, max_students=1)
        rows = [
            {"email": f"s{i}@x.test", "password": "p", "firstName": "S", "lastName": "N", "studentClass": "SS1"}
            for i in range(2)
        ]

        response = await client.post(
            f"{USERS}/bulk", json={"students": rows}, headers=bearer(school["admin_token"])
        )
        listing = await client.get(f"{USERS}/STUDENT", headers=bearer(school["admin_token"]))

        assert response.status_code == 400
        assert response.json()["error"] == "Cannot add 2 students. Limit reached. Remaining slots: 1"
        assert listing.json() == []


class TestUpdateAndList:
    @pytest.mark.asyncio
    async def test_update_own_member(self, client, db_session, school):
        student = await create_member(db_session, school, Role.STUDENT, "kid@greenfield.test")

        response = await client.put(
            f"{USERS}/{student['id']}",
            json={"studentClass": "SS3", "phone": "0800"},
            headers=bearer(school["admin_token"]),
        )

        assert response.status_code == 200
        assert response.json()["studentClass"] == "SS3"
        assert response.json()["phone"] == "0800"
        assert response.json()["studentId"] == student["student_id"]

    @pytest.mark.asyncio
    async def test_update_member_of_another_school(self, client, db_session, school):
        other = await create_school(db_session, name="Other", admin_email="a@other.test")
        stranger = await create_member(db_session, other, Role.TEACHER, "t@other.test")

        response = await client.put(
            f"{USERS}/{stranger['id']}",
            json={"firstName": "Hacked"},
            headers=bearer(school["admin_token"]),
        )

        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden: User belongs to another school"}

    @pytest.mark.asyncio
    async def test_update_unknown_user(self, client, school):
        response = await client.put(
            f"{USERS}/missing", json={"firstName": "X"}, headers=bearer(school["admin_token"])
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_by_role_is_school_scoped(self, client, db_session, school):
        other = await create_school(db_session, name="Other", admin_email="a@other.test")
        await create_member(db_session, school, Role.TEACHER, "t1@greenfield.test")
        await create_member(db_session, school, Role.TEACHER, "t2@greenfield.test")
        await create_member(db_session, other, Role.TEACHER, "t@other.test")

        response = await client.get(f"{USERS}/TEACHER", headers=bearer(school["admin_token"]))

        assert response.status_code == 200
        assert sorted(user["email"] for user in response.json()) == [
            "t1@greenfield.test",
            "t2@greenfield.test",
        ]

    @pytest.mark.asyncio
    async def test_superadmin_lists_with_school_id(self, client, superadmin, school):
        response = await client.get(
            f"{USERS}/ADMIN",
            params={"schoolId": school["id"]},
            headers=bearer(superadmin["token"]),
        )

        assert response.status_code == 200
        assert [user["email"] for user in response.json()] == [school["admin_email"]]

    @pytest.mark.asyncio
    async def test_superadmin_lists_without_school_id(self, client, superadmin):
        response = await client.get(f"{USERS}/ADMIN", headers=bearer(superadmin["token"]))

        assert response.status_code == 400
        assert response.json() == {"error": "School ID is required"}

    @pytest.mark.asyncio
    async def test_superadmin_lists_unknown_school(self, client, superadmin):
        response = await client.get(
            f"{USERS}/ADMIN",
            params={"schoolId": "no-such-school"},
            headers=bearer(superadmin["token"]),
        )

        assert response.status_code == 404
        assert response.json() == {"error": "School not found"}

    @pytest.mark.asyncio
    async def test_list_invalid_role(self, client, school):
        response = await client.get(f"{USERS}/JANITOR", headers=bearer(school["admin_token"]))

        assert response.status_code == 400


class TestStats:
    @pytest.mark.asyncio
    async def test_counts(self, client, db_session, school):
        await create_member(db_session, school, Role.TEACHER, "t@greenfield.test")
        await create_member(db_session, school, Role.STUDENT, "s1@greenfield.test")
        await create_member(db_session, school, Role.STUDENT, "s2@greenfield.test")

        response = await client.get("/api/admin/stats", headers=bearer(school["admin_token"]))

        assert response.status_code == 200
        assert response.json() == {"teacherCount": 1, "studentCount": 2}

    @pytest.mark.asyncio
    async def test_superadmin_has_no_school_stats(self, client, superadmin):
        response = await client.get("/api/admin/stats", headers=bearer(superadmin["token"]))

        assert response.status_code == 403


class TestSubjects:
    @pytest.mark.asyncio
    async def test_create_list_delete(self, client, db_session, school):
        headers = bearer(school["admin_token"])

        created = await client.post(
            SUBJECTS, json={"name": "Physics", "section": "senior"}, headers=headers
        )
        assert created.status_code == 201
        subject = created.json()
        assert subject["section"] == "SENIOR"
        assert subject["category"] == "General"

        teacher = await create_member(db_session, school, Role.TEACHER, "t@greenfield.test")
        listing = await client.get(SUBJECTS, headers=bearer(teacher["token"]))
        assert [s["name"] for s in listing.json()] == ["Physics"]

        deleted = await client.delete(f"{SUBJECTS}/{subject['id']}", headers=headers)
        assert deleted.json() == {"message": "Subject deleted successfully"}

        missing = await client.delete(f"{SUBJECTS}/{subject['id']}", headers=headers)
        assert missing.status_code == 404
        assert missing.json() == {"error": "Subject not found"}

    @pytest.mark.asyncio
    async def test_duplicate_in_section(self, client, school):
        headers = bearer(school["admin_token"])
        await client.post(SUBJECTS, json={"name": "Physics", "section": "SENIOR"}, headers=headers)

        response = await client.post(
            SUBJECTS, json={"name": "Physics", "section": "SENIOR"}, headers=headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Subject already exists in this section"

    @pytest.mark.asyncio
    async def test_name_and_section_required(self, client, school):
        response = await client.post(
            SUBJECTS, json={"name": "Physics"}, headers=bearer(school["admin_token"])
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Name and Section are required"}

    @pytest.mark.asyncio
    async def test_teacher_cannot_manage_subjects(self, client, db_session, school):
        teacher = await create_member(db_session, school, Role.TEACHER, "t@greenfield.test")

        response = await client.post(
            SUBJECTS, json={"name": "Physics", "section": "SENIOR"}, headers=bearer(teacher["token"])
        )

        assert response.status_code == 403


class TestExams:
    EXAM = {"subject": "Mathematics", "class": "JSS1", "date": "2026-11-02", "time": "09:00"}

    @pytest.mark.asyncio
    async def test_create_update_delete(self, client, school):
        headers = bearer(school["admin_token"])

        created = await client.post(EXAMS, json=self.EXAM, headers=headers)
        assert created.status_code == 201
        exam = created.json()
        assert exam["class"] == "JSS1"
        assert exam["date"] == "2026-11-02"
        assert exam["schoolId"] == school["id"]

        updated = await client.put(
            f"{EXAMS}/{exam['id']}", json={"time": "11:00", "date": "2026-11-03"}, headers=headers
        )
        assert updated.status_code == 200
        assert updated.json()["time"] == "11:00"
        assert updated.json()["date"] == "2026-11-03"
        assert updated.json()["subject"] == "Mathematics"

        deleted = await client.delete(f"{EXAMS}/{exam['id']}", headers=headers)
        assert deleted.json() == {"message": "Exam schedule deleted successfully"}
        assert (await client.get(EXAMS, headers=headers)).json() == []

    @pytest.mark.asyncio
    async def test_listing_is_ordered_by_date(self, client, school):
        headers = bearer(school["admin_token"])
        await client.post(EXAMS, json={**self.EXAM, "date": "2026-12-01"}, headers=headers)
        await client.post(EXAMS, json={**self.EXAM, "date": "2026-11-01"}, headers=headers)

        response = await client.get(EXAMS, headers=headers)

        assert [exam["date"] for exam in response.json()] == ["2026-11-01", "2026-12-01"]

    @pytest.mark.asyncio
    async def test_other_school_sees_not_found(self, client, db_session, school):
        other = await create_school(db_session, name="Other", admin_email="a@other.test")
        exam = (
            await client.post(EXAMS, json=self.EXAM, headers=bearer(school["admin_token"]))
        ).json()
        headers = bearer(other["admin_token"])

        updated = await client.put(f"{EXAMS}/{exam['id']}", json={"time": "10:00"}, headers=headers)
        deleted = await client.delete(f"{EXAMS}/{exam['id']}", headers=headers)
        listing = await client.get(EXAMS, headers=headers)

        assert updated.status_code == 404
        assert updated.json() == {"error": "Exam schedule not found"}
        assert deleted.status_code == 404
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_superadmin_names_school_in_query(self, client, superadmin, school):
        headers = bearer(superadmin["token"])

        missing = await client.post(EXAMS, json=self.EXAM, headers=headers)
        created = await client.post(
            EXAMS, json=self.EXAM, params={"schoolId": school["id"]}, headers=headers
        )

        assert missing.status_code == 400
        assert created.status_code == 201
        assert created.json()["schoolId"] == school["id"]

    @pytest.mark.asyncio
    async def test_superadmin_names_unknown_school(self, client, superadmin):
        headers = bearer(superadmin["token"])
        params = {"schoolId": "no-such-school"}

        created = await client.post(EXAMS, json=self.EXAM, params=params, headers=headers)
        listing = await client.get(EXAMS, params=params, headers=headers)

        assert created.status_code == 404
        assert created.json() == {"error": "School not found"}
        assert listing.status_code == 404
        assert listing.json() == {"error": "School not found"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("key", "label"), [("subject", "Subject"), ("class", "Class"), ("date", "Date")]
    )
    async def test_update_cannot_clear_required_field(self, client, school, key, label):
        headers = bearer(school["admin_token"])
        exam = (await client.post(EXAMS, json=self.EXAM, headers=headers)).json()

        response = await client.put(f"{EXAMS}/{exam['id']}", json={key: None}, headers=headers)

        assert response.status_code == 400
        assert response.json() == {"error": f"{label} cannot be empty"}
        listing = (await client.get(EXAMS, headers=headers)).json()
        assert listing[0][key] == exam[key]

    @pytest.mark.asyncio
    async def test_update_rejects_empty_subject(self, client, school):
        headers = bearer(school["admin_token"])
        exam = (await client.post(EXAMS, json=self.EXAM, headers=headers)).json()

        response = await client.put(f"{EXAMS}/{exam['id']}", json={"subject": ""}, headers=headers)

        assert response.status_code == 400
        assert response.json()["field"] == "subject"
