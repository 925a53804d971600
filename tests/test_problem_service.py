"""
Tests for problem and learning item services, including revision
scheduling when an item is created with is_revision set.
"""

import time
import pytest
from datetime import date, datetime, timedelta
from app import create_app
from models import db, utc_today
from models.user import User
from models.revision_item import RevisionItem
from services.analytics_service import calculate_current_streak
from services.exceptions import NotFoundError
from services.problem_service import (
    create_problem,
    get_user_problems,
    get_problem,
    update_problem,
    delete_problem,
    get_user_problem_stats,
)
from services.learning_service import (
    create_learning_item,
    get_user_learning_items,
    update_learning_item,
    delete_learning_item,
)


@pytest.fixture
def app():
    """Create application for testing"""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def test_user(app):
    user = User(name='Barbara', email='barbara@example.com')
    db.session.add(user)
    db.session.commit()
    return user


def problem_data(**overrides):
    data = {
        'title': 'Two Sum',
        'platform': 'LeetCode',
        'difficulty': 'easy',
        'topic': 'Arrays',
        'time_spent': 15,
        'outcome': 'solved',
    }
    data.update(overrides)
    return data


class TestCreateProblem:
    def test_create(self, test_user):
        problem = create_problem(test_user.id, problem_data(tags=['hash-map']))

        assert problem.id is not None
        assert problem.tags == ['hash-map']
        assert problem.is_revision is False
        assert RevisionItem.query.count() == 0

    def test_unknown_user(self, app):
        with pytest.raises(NotFoundError):
            create_problem(999, problem_data())

    def test_invalid_platform(self, test_user):
        with pytest.raises(ValueError):
            create_problem(test_user.id, problem_data(platform='Kaggle'))

    def test_marked_for_revision_schedules_first_review(self, test_user):
        problem = create_problem(
            test_user.id,
            problem_data(is_revision=True, date=datetime(2024, 1, 1, 8, 30))
        )

        revisions = RevisionItem.query.filter_by(item_id=problem.id, item_type='problem').all()
        assert len(revisions) == 1
        assert revisions[0].revision_cycle == 1
        assert revisions[0].original_date == date(2024, 1, 1)
        assert revisions[0].next_revision_date == utc_today() + timedelta(days=1)


class TestQueryProblems:
    def test_filters_and_ordering(self, test_user):
        create_problem(test_user.id, problem_data(title='Old', date=datetime(2024, 1, 1)))
        create_problem(test_user.id, problem_data(
            title='New', topic='Dynamic Programming', difficulty='hard', date=datetime(2024, 2, 1)
        ))

        assert [p.title for p in get_user_problems(test_user.id)] == ['New', 'Old']
        assert [p.title for p in get_user_problems(test_user.id, difficulty='hard')] == ['New']
        assert [p.title for p in get_user_problems(test_user.id, topic='dynamic')] == ['New']
        assert [p.title for p in get_user_problems(test_user.id, limit=1, offset=1)] == ['Old']

    def test_stats(self, test_user):
        create_problem(test_user.id, problem_data(time_spent=10))
        create_problem(test_user.id, problem_data(outcome='failed', time_spent=20))
        create_problem(test_user.id, problem_data(platform='Codeforces', difficulty='medium', time_spent=30))

        stats = get_user_problem_stats(test_user.id)

        assert stats['total_problems'] == 3
        assert stats['solved_problems'] == 2
        assert stats['total_time_spent'] == 60
        assert stats['solve_rate'] == 66.67
        assert {'difficulty': 'easy', 'count': 2} in stats['difficulty_breakdown']
        assert {'platform': 'Codeforces', 'count': 1} in stats['platform_breakdown']

    def test_stats_without_problems(self, test_user):
        stats = get_user_problem_stats(test_user.id)

        assert stats['total_problems'] == 0
        assert stats['solve_rate'] == 0


class TestUpdateDeleteProblem:
    def test_partial_update(self, test_user):
        problem = create_problem(test_user.id, problem_data())

        updated = update_problem(problem.id, {'outcome': 'stuck', 'user_id': 42})

        assert updated.outcome == 'stuck'
        assert updated.user_id == test_user.id

    def test_invalid_update_is_rejected(self, test_user):
        problem = create_problem(test_user.id, problem_data())

        with pytest.raises(ValueError):
            update_problem(problem.id, {'time_spent': 5000})

        assert get_problem(problem.id).time_spent == 15

    def test_delete(self, test_user):
        problem = create_problem(test_user.id, problem_data())

        delete_problem(problem.id)

        with pytest.raises(NotFoundError):
            get_problem(problem.id)


class TestLearningItems:
    def test_create_with_revision(self, test_user):
        item = create_learning_item(test_user.id, {
            'title': 'System Design Primer',
            'type': 'book',
            'category': 'Architecture',
            'date': date(2024, 1, 1),
            'is_revision': True,
        })

        assert item.status == 'not-started'
        revision = RevisionItem.query.filter_by(item_type='learning', item_id=item.id).one()
        assert revision.original_date == date(2024, 1, 1)

    def test_filters(self, test_user):
        create_learning_item(test_user.id, {'title': 'A', 'type': 'course', 'category': 'Algorithms'})
        create_learning_item(test_user.id, {
            'title': 'B', 'type': 'video', 'category': 'Databases', 'status': 'completed'
        })

        assert [i.title for i in get_user_learning_items(test_user.id, category='algo')] == ['A']
        assert [i.title for i in get_user_learning_items(test_user.id, status='completed')] == ['B']
        assert [i.title for i in get_user_learning_items(test_user.id, type='video')] == ['B']

    def test_update_and_delete(self, test_user):
        item = create_learning_item(test_user.id, {'title': 'A', 'type': 'course', 'category': 'Algorithms'})

        updated = update_learning_item(item.id, {'progress': 80, 'status': 'in-progress'})
        assert (updated.progress, updated.status) == (80, 'in-progress')

        with pytest.raises(ValueError):
            update_learning_item(item.id, {'status': 'abandoned'})

        delete_learning_item(item.id)
        assert get_user_learning_items(test_user.id) == []

    def test_unknown_user(self, app):
        with pytest.raises(NotFoundError):
            create_learning_item(999, {'title': 'A', 'type': 'course', 'category': 'Algorithms'})


class TestServerClock:
    """Items logged now must land on today even when the host is far from UTC"""

    @pytest.fixture
    def far_from_utc(self, monkeypatch):
        monkeypatch.setenv('TZ', 'Etc/GMT+12')
        time.tzset()
        yield
        monkeypatch.undo()
        time.tzset()

    def test_problem_logged_now_counts_toward_streak(self, test_user, far_from_utc):
        problem = create_problem(test_user.id, problem_data())

        assert problem.date.date() == utc_today()
        assert calculate_current_streak([problem]) == 1

    def test_learning_item_and_revision_share_the_clock(self, test_user, far_from_utc):
        item = create_learning_item(test_user.id, {
            'title': 'A', 'type': 'course', 'category': 'Algorithms', 'is_revision': True
        })

        revision = RevisionItem.query.filter_by(item_type='learning', item_id=item.id).one()
        assert item.date == utc_today()
        assert revision.next_revision_date == item.date + timedelta(days=1)
