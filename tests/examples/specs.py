"""Example forests used by command-line tests."""

from specsuite import after_each, before_each, describe, fit, it, xit

JOURNAL: list[str] = []


def ok() -> None:
    """Pass."""


def fail() -> None:
    """Fail with an assertion."""
    raise AssertionError('arithmetic is broken')


passing = describe('calculator', [
    before_each(lambda: JOURNAL.append('setup')),
    after_each(lambda: JOURNAL.append('teardown')),
    it('adds', ok, tags=['math']),
    it('subtracts', ok),
    xit('divides by zero', ok, 'not decided yet'),
])

failing = [
    describe('parser', [
        it('reads numbers', ok),
        it('reads words', fail, tags=['slow']),
    ]),
    it('standalone', ok),
]

focused = [
    describe('focused group', [
        fit('only this', ok),
        it('not this', fail),
    ]),
    it('nor this', fail),
]

not_a_forest = 42
