from app.models.teacher import TeacherPost
from app.services.eligibility import is_eligible, is_post_eligible, teaches_subject


def test_pgt_teacher_only_covers_senior_grades(factory, policy):
    teacher = factory.teacher("Dr. Rajesh Kumar", post=TeacherPost.PGT, subjects=["Mathematics"])

    assert is_eligible(policy, teacher, 11, "Mathematics")
    assert is_eligible(policy, teacher, 9, "Mathematics")
    assert not is_eligible(policy, teacher, 8, "Mathematics")


def test_tgt_teacher_grade_range(factory, policy):
    teacher = factory.teacher("Mrs. Priya Sharma", post=TeacherPost.TGT, subjects=["English"])

    assert is_post_eligible(policy, teacher, 6)
    assert is_post_eligible(policy, teacher, 10)
    assert not is_post_eligible(policy, teacher, 11)


def test_subject_match_is_exact(factory, policy):
    teacher = factory.teacher("Mr. Amit Patel", subjects=["Physics"])

    assert teaches_subject(teacher, "Physics")
    assert not teaches_subject(teacher, "physics")
    assert not is_eligible(policy, teacher, 11, "Phys")


def test_unavailable_teacher_is_not_eligible(factory, policy):
    teacher = factory.teacher("Ms. Sunita Reddy", subjects=["Chemistry"], is_available=False)

    assert not is_eligible(policy, teacher, 12, "Chemistry")
