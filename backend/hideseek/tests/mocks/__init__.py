from hideseek.tests.mocks.subscriber import FailingSubscriber, MockSubscriber

__all__ = ["FailingSubscriber", "MockSubscriber"]
