from tinycache.metrics import Metrics, MetricType, metric_name


def test_new_metrics_start_at_zero():
    m = Metrics()
    assert all(m.get(kind) == 0 for kind in MetricType)


def test_metrics_add_get():
    m = Metrics()
    m.add(MetricType.HIT, 1, 1)
    m.add(MetricType.HIT, 2, 2)
    m.add(MetricType.HIT, 3, 3)
    assert m.hits() == 6


def test_metrics_ratio():
    m = Metrics()
    assert m.ratio() == 0
    m.add(MetricType.HIT, 1, 1)
    m.add(MetricType.HIT, 2, 2)
    m.add(MetricType.MISS, 1, 1)
    m.add(MetricType.MISS, 2, 2)
    assert m.ratio() == 0.5


def test_metrics_every_accessor():
    m = Metrics()
    for kind in MetricType:
        m.add(kind, 1, 1)
    assert m.hits() == 1
    assert m.misses() == 1
    assert m.ratio() == 0.5
    assert m.keys_added() == 1
    assert m.keys_updated() == 1
    assert m.keys_evicted() == 1
    assert m.cost_added() == 1
    assert m.cost_evicted() == 1
    assert m.sets_dropped() == 1
    assert m.sets_rejected() == 1
    assert m.gets_dropped() == 1
    assert m.gets_kept() == 1
    text = str(m)
    assert len(text) > 0
    assert text.startswith("hit: 1 miss: 1 ")
    assert text.endswith("gets-total: 2 hit-ratio: 0.50")


def test_metric_name_of_unknown_kind():
    assert metric_name(len(MetricType)) == "unidentified"
    assert metric_name(MetricType.REJECT_SETS) == "sets-rejected"


def test_negative_delta_wraps_and_cancels():
    m = Metrics()
    m.add(MetricType.COST_ADD, 7, 5)
    m.add(MetricType.COST_ADD, 7, -2)
    assert m.cost_added() == 3


def test_metrics_clear():
    m = Metrics()
    m.add(MetricType.KEY_ADD, 4, 10)
    m.add(MetricType.HIT, 9, 3)
    m.clear()
    assert m.keys_added() == 0
    assert m.hits() == 0
    assert m.ratio() == 0.0