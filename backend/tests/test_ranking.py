import random

from app.models.teacher import Teacher, TeacherPost
from app.services.ranking import rank_candidates


def _teacher(teacher_id, name, current_periods, subjects=("Mathematics",)):
    return Teacher(
        id=teacher_id,
        name=name,
        phone="000",
        post=TeacherPost.PGT,
        subjects=list(subjects),
        current_periods=current_periods,
        is_available=True,
    )


def test_least_loaded_teacher_ranks_first():
    ranked = rank_candidates(
        [_teacher("t1", "Anil", 4), _teacher("t2", "Bina", 1), _teacher("t3", "Chitra", 2)],
        "Mathematics",
    )
    assert [item.id for item in ranked] == ["t2", "t3", "t1"]


def test_subject_match_outranks_lighter_load():
    ranked = rank_candidates(
        [_teacher("t1", "Anil", 0, subjects=["Physics"]), _teacher("t2", "Bina", 5)],
        "Mathematics",
    )
    assert [item.id for item in ranked] == ["t2", "t1"]


def test_equal_load_breaks_ties_by_name_ignoring_case():
    ranked = rank_candidates(
        [_teacher("t1", "meera", 2), _teacher("t2", "Kavya", 2), _teacher("t3", "Lata", 2)],
        "Mathematics",
    )
    assert [item.name for item in ranked] == ["Kavya", "Lata", "meera"]


def test_order_does_not_depend_on_input_order():
    teachers = [
        _teacher("t1", "Same Name", 3),
        _teacher("t2", "Same Name", 3),
        _teacher("t3", "Other", 3),
        _teacher("t4", "Zed", 0),
    ]
    expected = [item.id for item in rank_candidates(teachers, "Mathematics")]
    shuffled = list(teachers)
    random.Random(7).shuffle(shuffled)

    assert [item.id for item in rank_candidates(shuffled, "Mathematics")] == expected
    assert expected == ["t4", "t3", "t1", "t2"]


def test_empty_pool():
    assert rank_candidates([], "Mathematics") == []
