import run_poll


def test_demo_runs_the_layer2_walkthrough(capsys):
    run_poll.main()
    out = capsys.readouterr().out
    assert "Double voting is not allowed" in out
    assert "incorrect key pair" in out
    assert "tally seen by dave: {'arbitrum': 1, 'optimism': 0, 'starknet': 2}" in out
