"""
Model-level tests: validators, cascades and derived properties.
"""

import pytest
from datetime import date, datetime
from app import create_app
from models import db
from models.user import User
from models.problem import Problem
from models.learning_item import LearningItem
from models.revision_item import RevisionItem
from models.roadmap import Roadmap
from models.topic import Topic
from models.subtopic import Subtopic
from services.user_service import delete_user


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
    user = User(name='Edsger', email='Edsger@Example.com')
    db.session.add(user)
    db.session.commit()
    return user


class TestUser:
    def test_email_is_lowercased(self, test_user):
        assert test_user.email == 'edsger@example.com'

    def test_invalid_email(self, app):
        with pytest.raises(ValueError):
            User(name='Bad', email='not-an-email')

    def test_password_hashing(self, test_user):
        assert test_user.check_password('anything') is False

        test_user.set_password('correct horse')

        assert test_user.password_hash != 'correct horse'
        assert test_user.check_password('correct horse') is True
        assert test_user.check_password('wrong') is False

    def test_to_dict_hides_password(self, test_user):
        test_user.set_password('correct horse')
        assert 'password_hash' not in test_user.to_dict()

    def test_unknown_auth_provider(self, app):
        with pytest.raises(ValueError):
            User(name='X', email='x@example.com', auth_provider='facebook')


class TestValidators:
    def test_problem_time_spent_bounds(self, test_user):
        with pytest.raises(ValueError):
            Problem(user_id=test_user.id, title='T', platform='LeetCode', difficulty='easy',
                    topic='Arrays', outcome='solved', time_spent=1441)

    def test_learning_progress_bounds(self, test_user):
        with pytest.raises(ValueError):
            LearningItem(user_id=test_user.id, title='T', type='course', category='C', progress=101)

    def test_revision_item_type(self, test_user):
        with pytest.raises(ValueError):
            RevisionItem(user_id=test_user.id, item_id=1, item_type='quiz',
                         original_date=date(2024, 1, 1), next_revision_date=date(2024, 1, 2))

    def test_revision_cycle_minimum(self, test_user):
        with pytest.raises(ValueError):
            RevisionItem(user_id=test_user.id, item_id=1, item_type='problem', revision_cycle=0,
                         original_date=date(2024, 1, 1), next_revision_date=date(2024, 1, 2))


class TestRoadmapCompletion:
    def test_empty_roadmap_is_not_completed(self, test_user):
        roadmap = Roadmap(user_id=test_user.id, title='Empty')
        db.session.add(roadmap)
        db.session.commit()

        assert roadmap.is_completed is False

    def test_completed_when_every_topic_completed(self, test_user):
        roadmap = Roadmap(user_id=test_user.id, title='Go')
        roadmap.topics.append(Topic(title='Syntax', is_completed=True))
        roadmap.topics.append(Topic(title='Goroutines', is_completed=False))
        db.session.add(roadmap)
        db.session.commit()

        assert roadmap.is_completed is False

        roadmap.topics[1].is_completed = True
        assert roadmap.is_completed is True


class TestCascade:
    def test_deleting_user_removes_owned_data(self, test_user):
        db.session.add(Problem(user_id=test_user.id, title='T', platform='LeetCode', difficulty='easy',
                               topic='Arrays', outcome='solved', date=datetime(2024, 1, 1)))
        db.session.add(LearningItem(user_id=test_user.id, title='L', type='book', category='C'))
        db.session.add(RevisionItem(user_id=test_user.id, item_id=1, item_type='problem',
                                    original_date=date(2024, 1, 1), next_revision_date=date(2024, 1, 2)))
        roadmap = Roadmap(user_id=test_user.id, title='R')
        topic = Topic(title='T')
        topic.subtopics.append(Subtopic(title='S'))
        roadmap.topics.append(topic)
        db.session.add(roadmap)
        db.session.commit()

        delete_user(test_user.id)

        assert User.query.count() == 0
        assert Problem.query.count() == 0
        assert LearningItem.query.count() == 0
        assert RevisionItem.query.count() == 0
        assert Roadmap.query.count() == 0
        assert Topic.query.count() == 0
        assert Subtopic.query.count() == 0
