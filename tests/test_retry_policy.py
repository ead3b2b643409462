from sitegen.llm.retry import RetryPolicy


def test_retry_policy_linear_delays():
    policy = RetryPolicy(max_attempts=3, base_delay=1.0)
    assert policy.get_delay(1) == 1.0
    assert policy.get_delay(2) == 2.0
    assert policy.get_delay(3) == 3.0


def test_retry_policy_scales_with_base_delay():
    policy = RetryPolicy(base_delay=0.5)
    assert [policy.get_delay(attempt) for attempt in (1, 2, 3)] == [0.5, 1.0, 1.5]


def test_retry_policy_clamps_attempt_to_one():
    policy = RetryPolicy(base_delay=2.0)
    assert policy.get_delay(0) == 2.0
    assert policy.get_delay(-3) == 2.0


def test_retry_policy_defaults():
    policy = RetryPolicy()
    assert policy.max_attempts == 3
    assert policy.base_delay == 1.0
