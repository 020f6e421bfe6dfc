"""
API smoke tests through the FastAPI test client.
"""
from datetime import date


def student_payload(roll="21CS001", mentor_id=None, tenth=75, **extra):
    payload = {
        "roll_number": roll,
        "student_name": "Aarav Sharma",
        "department": "Computer Science",
        "academic_details": {"tenth_percentage": tenth, "twelfth_percentage": 80, "ug_percentage": 7.2},
    }
    if mentor_id:
        payload["mentor_id"] = mentor_id
    payload.update(extra)
    return payload


class TestAuth:

    def test_login_by_username_and_email(self, client, mentor_user):
        response = client.post('/api/auth/login', json={"username": "Mentor1", "password": "mentor123"})
        assert response.status_code == 200
        assert response.json()["user_id"] == mentor_user.id
        assert response.json()["role"] == "mentor"

        response = client.post('/api/auth/login',
                               json={"username": "rajesh.kumar@university.edu", "password": "mentor123"})
        assert response.status_code == 200

    def test_wrong_password(self, client):
        response = client.post('/api/auth/login', json={"username": "mentor1", "password": "nope"})
        assert response.status_code == 401

    def test_inactive_account(self, client, user_repo, mentor_user):
        user_repo.save(mentor_user.model_copy(update={"is_active": False}))
        response = client.post('/api/auth/login', json={"username": "mentor1", "password": "mentor123"})
        assert response.status_code == 403

    def test_me(self, client, admin_headers):
        response = client.get('/api/auth/me', headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["username"] == "admin"

    def test_bad_token(self, client):
        response = client.get('/api/auth/me', headers={'Authorization': 'Bearer garbage'})
        assert response.status_code == 401

    def test_change_password(self, client, mentor_headers):
        response = client.post('/api/auth/change-password', headers=mentor_headers,
                               json={"current_password": "wrong!", "new_password": "newpass1"})
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_FAILED"


class TestStudents:

    def test_create_list_get(self, client, mentor_headers, mentor_user):
        response = client.post('/api/students', json=student_payload(), headers=mentor_headers)
        assert response.status_code == 201
        created = response.json()
        assert created["status"] == "eligible"
        assert created["mentor_id"] == mentor_user.id

        listing = client.get('/api/students', headers=mentor_headers).json()
        assert [s["roll_number"] for s in listing] == ["21CS001"]

        fetched = client.get(f'/api/students/{created["id"]}', headers=mentor_headers)
        assert fetched.json()["placement"] == {"status": "eligible"}

    def test_filters_as_query_params(self, client, admin_headers, mentor_headers, mentor_user):
        first = client.post('/api/students', json=student_payload(), headers=mentor_headers).json()
        client.post('/api/students', json=student_payload(roll="21CS002", tenth=40), headers=mentor_headers)
        client.post(f'/api/students/{first["id"]}/placement', headers=mentor_headers,
                    json={"company": "Acme", "package": 10, "placement_date": "2024-03-01"})

        placed = client.get('/api/students', params={"status": "placed"}, headers=admin_headers).json()
        assert [s["roll_number"] for s in placed] == ["21CS001"]

        acme = client.get('/api/students', params={"company": "acme", "year": "2024"}, headers=admin_headers)
        assert len(acme.json()) == 1

        by_mentor = client.get('/api/students', params={"mentor": mentor_user.id}, headers=admin_headers)
        assert len(by_mentor.json()) == 2

    def test_missing_student(self, client, admin_headers):
        response = client.get('/api/students/nope', headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_duplicate_roll_number(self, client, mentor_headers):
        client.post('/api/students', json=student_payload(), headers=mentor_headers)
        response = client.post('/api/students', json=student_payload(), headers=mentor_headers)
        assert response.status_code == 409

    def test_placement_flow(self, client, mentor_headers):
        student = client.post('/api/students', json=student_payload(), headers=mentor_headers).json()

        response = client.post(f'/api/students/{student["id"]}/placement', headers=mentor_headers,
                               json={"company": "Acme", "package": 12, "placement_date": "2024-03-01"})
        assert response.status_code == 201
        assert response.json()["status"] == "placed"
        assert response.json()["placement"]["record"]["company"] == "Acme"

        response = client.put(f'/api/students/{student["id"]}/placement', headers=mentor_headers,
                              json={"package": 13.5})
        assert response.json()["placement"]["record"]["package"] == 13.5

    def test_ineligible_cannot_be_placed(self, client, mentor_headers):
        student = client.post('/api/students', json=student_payload(tenth=40), headers=mentor_headers).json()
        response = client.post(f'/api/students/{student["id"]}/placement', headers=mentor_headers,
                               json={"company": "Acme", "package": 12, "placement_date": "2024-03-01"})
        assert response.status_code == 400

    def test_status_change(self, client, mentor_headers):
        student = client.post('/api/students', json=student_payload(), headers=mentor_headers).json()
        response = client.put(f'/api/students/{student["id"]}/status', headers=mentor_headers,
                              json={"status": "higher_studies"})
        assert response.json()["status"] == "higher_studies"

    def test_mentor_cannot_delete(self, client, mentor_headers, admin_headers):
        student = client.post('/api/students', json=student_payload(), headers=mentor_headers).json()
        assert client.delete(f'/api/students/{student["id"]}', headers=mentor_headers).status_code == 403
        assert client.delete(f'/api/students/{student["id"]}', headers=admin_headers).status_code == 200


class TestImportExport:

    CSV = (
        b"Roll No,Name,Dept,10th,12th,UG,Status,Company,CTC,Placement Date\n"
        b"21CS010,Ira Nair,CSE,80,82,78,Placed,Acme,12,2024-03-01\n"
        b"21IT011,Myra Iyer,IT,58,82,7.8,,,,\n"
    )

    def test_import_csv(self, client, admin_headers, student_repo):
        response = client.post('/api/imports/students', headers=admin_headers,
                               files={"file": ("students.csv", self.CSV, "text/csv")})
        assert response.status_code == 200
        body = response.json()
        assert body["imported"] == 2
        assert [s["status"] for s in body["students"]] == ["placed", "ineligible"]
        assert len(student_repo.list_all()) == 2

    def test_unsupported_extension(self, client, admin_headers):
        response = client.post('/api/imports/students', headers=admin_headers,
                               files={"file": ("students.pdf", b"%PDF", "application/pdf")})
        assert response.status_code == 400
        assert response.json()["code"] == "SPREADSHEET_ERROR"

    def test_preview_columns(self, client, admin_headers):
        response = client.post('/api/imports/preview-columns', headers=admin_headers,
                               files={"file": ("students.csv", self.CSV, "text/csv")})
        body = response.json()
        assert body["mapping"]["roll_number"] == "Roll No"
        assert body["mapping"]["package"] == "CTC"
        assert body["unmapped_headers"] == []

    def test_template(self, client, mentor_headers):
        response = client.get('/api/imports/template', headers=mentor_headers)
        assert response.status_code == 200
        assert "student_import_template.xlsx" in response.headers["content-disposition"]

    def test_export_csv(self, client, admin_headers):
        client.post('/api/imports/students', headers=admin_headers,
                    files={"file": ("students.csv", self.CSV, "text/csv")})
        response = client.get('/api/exports/students', params={"format": "csv"}, headers=admin_headers)

        assert response.status_code == 200
        assert f'student_data_{date.today().isoformat()}.csv' in response.headers["content-disposition"]
        assert response.text.splitlines()[0].startswith("Roll Number,Student Name")
        assert len(response.text.strip().splitlines()) == 3

    def test_mentor_export_filename(self, client, mentor_headers):
        response = client.get('/api/exports/students', headers=mentor_headers)
        assert "Dr._Rajesh_Kumar_assigned_students_" in response.headers["content-disposition"]


class TestStats:

    def test_dashboard(self, client, admin_headers, student_repo, scenario_students):
        student_repo.add_many(scenario_students)
        report = client.get('/api/stats/dashboard', headers=admin_headers).json()

        assert report["kpis"]["total_students"] == 3
        assert report["kpis"]["top_company"] == "Acme"
        assert report["kpis"]["average_package"] == 10

    def test_dashboard_filtered(self, client, admin_headers, student_repo, scenario_students):
        student_repo.add_many(scenario_students)
        report = client.get('/api/stats/dashboard', params={"status": "ineligible"}, headers=admin_headers).json()
        assert report["kpis"]["total_students"] == 1

    def test_mentor_stats_admin_only(self, client, admin_headers, mentor_headers):
        assert client.get('/api/stats/mentors', headers=mentor_headers).status_code == 403
        stats = client.get('/api/stats/mentors', headers=admin_headers).json()
        assert [s["mentor_name"] for s in stats] == ["Dr. Rajesh Kumar", "Prof. Priya Sharma"]


class TestDepartmentsAndMentors:

    def test_list_departments(self, client, mentor_headers):
        all_depts = client.get('/api/departments', headers=mentor_headers).json()
        active = client.get('/api/departments', params={"active_only": True}, headers=mentor_headers).json()
        assert len(all_depts) == 3
        assert len(active) == 2

    def test_department_admin_only(self, client, mentor_headers):
        response = client.post('/api/departments', headers=mentor_headers, json={"name": "Physics", "code": "PH"})
        assert response.status_code == 403

    def test_department_lifecycle(self, client, admin_headers):
        created = client.post('/api/departments', headers=admin_headers,
                              json={"name": "Physics", "code": "ph"}).json()
        assert created["code"] == "PH"

        duplicate = client.post('/api/departments', headers=admin_headers, json={"name": "physics", "code": "PY"})
        assert duplicate.status_code == 400

        toggled = client.post(f'/api/departments/{created["id"]}/toggle', headers=admin_headers).json()
        assert toggled["is_active"] is False

        assert client.delete(f'/api/departments/{created["id"]}', headers=admin_headers).status_code == 200

    def test_delete_department_in_use(self, client, admin_headers, departments):
        # mentor2 belongs to Information Technology
        response = client.delete(f'/api/departments/{departments[1].id}', headers=admin_headers)
        assert response.status_code == 409
        forced = client.delete(f'/api/departments/{departments[1].id}', params={"force": True},
                               headers=admin_headers)
        assert forced.status_code == 200

    def test_mentor_crud(self, client, admin_headers):
        response = client.post('/api/mentors', headers=admin_headers,
                               json={"username": "mentor3", "name": "Dr. Amit Patel", "email": "amit@university.edu"})
        assert response.status_code == 201
        mentor = response.json()

        login = client.post('/api/auth/login', json={"username": "mentor3", "password": "mentor123"})
        assert login.status_code == 200

        updated = client.put(f'/api/mentors/{mentor["id"]}', headers=admin_headers,
                             json={"phone": "+91 9840097320", "username": "renamed"}).json()
        assert updated["username"] == "mentor3"
        assert updated["phone"] == "+91 9840097320"

        assert client.delete(f'/api/mentors/{mentor["id"]}', headers=admin_headers).status_code == 200

    def test_duplicate_mentor_username(self, client, admin_headers):
        response = client.post('/api/mentors', headers=admin_headers, json={"username": "MENTOR1", "name": "Dup"})
        assert response.status_code == 409


class TestHealth:

    def test_root(self, client):
        assert client.get('/').json()["status"] == "healthy"
