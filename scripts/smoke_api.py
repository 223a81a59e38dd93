"""对本地运行中的服务走一遍主流程：讲师注册 → 建课 → 学生注册 → 登记成绩。"""
import sys

import requests

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://127.0.0.1:8000"


def main():
    lecturer = requests.post(
        f"{BASE_URL}/api/lecturers/register",
        json={
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "password": "password123",
            "department": "Computing",
        },
    )
    print(f"讲师注册: {lecturer.status_code}")

    course = requests.post(
        f"{BASE_URL}/api/courses/create",
        json={
            "name": "CS101",
            "description": "Intro",
            "lecturer": "ada@example.com",
            "category": "CS",
            "duration": 10,
            "content": [{"title": "L1", "url": "http://x"}],
        },
    )
    print(f"建课: {course.status_code} {course.text}")
    if course.status_code != 201:
        return

    token = requests.post(
        f"{BASE_URL}/api/users/register",
        json={"name": "Alan Turing", "email": "alan@example.com", "password": "password123"},
    ).json().get("token")
    me = requests.get(f"{BASE_URL}/api/users/me", headers={"Authorization": f"Bearer {token}"})
    print(f"学生信息: {me.status_code} {me.text}")

    grade = requests.post(
        f"{BASE_URL}/api/grades/assign",
        json={"student": me.json()["id"], "course": course.json()["course"]["id"], "status": "A"},
    )
    print(f"登记成绩: {grade.status_code} {grade.text}")


if __name__ == "__main__":
    main()
