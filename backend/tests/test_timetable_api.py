def test_teacher_crud(client):
    created = client.post(
        "/api/teachers/",
        json={
            "name": "Mrs. Priya Sharma",
            "phone": "+91 98765 43211",
            "email": "priya@school.edu",
            "post": "TGT",
            "subjects": ["English", " English ", "Hindi"],
        },
    )
    assert created.status_code == 201
    teacher = created.json()
    assert teacher["subjects"] == ["English", "Hindi"]
    assert teacher["eligible_grades"] == [6, 7, 8, 9, 10]
    assert teacher["max_periods"] == 6
    assert teacher["current_periods"] == 0

    duplicate = client.post(
        "/api/teachers/",
        json={"name": "Other", "phone": "12345", "email": "priya@school.edu", "post": "PGT", "subjects": ["English"]},
    )
    assert duplicate.status_code == 409

    promoted = client.put(f"/api/teachers/{teacher['id']}", json={"post": "PGT"})
    assert promoted.status_code == 200
    assert promoted.json()["eligible_grades"] == [9, 10, 11, 12]

    assert client.delete(f"/api/teachers/{teacher['id']}").status_code == 200
    assert client.get(f"/api/teachers/{teacher['id']}").status_code == 404


def test_period_rules_and_weekly_conflicts(client):
    maths = client.post("/api/subjects", json={"name": "Mathematics", "code": "MATH"}).json()
    class_9a = client.post("/api/classes", json={"grade": 9, "section": "A"}).json()
    class_9b = client.post("/api/classes", json={"grade": 9, "section": "B"}).json()
    teacher = client.post(
        "/api/teachers/",
        json={"name": "Mr. Amit Patel", "phone": "12345", "post": "PGT", "subjects": ["Mathematics"]},
    ).json()

    def add_period(class_id, day, period_number):
        return client.post(
            "/api/periods",
            json={
                "day": day,
                "period_number": period_number,
                "class_id": class_id,
                "subject_id": maths["id"],
                "teacher_id": teacher["id"],
            },
        )

    assert add_period(class_9a["id"], "Tuesday", 1).status_code == 201
    assert add_period(class_9a["id"], "tuesday", 1).status_code == 409
    assert add_period(class_9a["id"], "sunday", 1).status_code == 422
    assert add_period(class_9b["id"], "tuesday", 1).status_code == 201
    assert (
        client.post(
            "/api/periods",
            json={
                "day": "tuesday",
                "period_number": 3,
                "start_time": "10:00",
                "end_time": "09:00",
                "class_id": class_9a["id"],
                "subject_id": maths["id"],
                "teacher_id": teacher["id"],
            },
        ).status_code
        == 422
    )

    conflicts = client.get(f"/api/classes/{class_9a['id']}/conflicts")
    assert conflicts.status_code == 200
    assert conflicts.json()["conflicts"] == ["Teacher Mr. Amit Patel has conflict on tuesday, Period 1"]

    workload = client.get(f"/api/teachers/{teacher['id']}/workload", params={"day": "Tuesday"})
    assert workload.status_code == 200
    payload = workload.json()
    assert payload["total_periods"] == 2
    assert payload["regular_periods"] == 2
    assert payload["can_take_more"] is True
    assert len(payload["schedule"]) == 2

    assert client.get(f"/api/teachers/{teacher['id']}/workload", params={"day": "funday"}).status_code == 400
    assert client.get("/api/teachers/missing/workload", params={"day": "monday"}).status_code == 404
