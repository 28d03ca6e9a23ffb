"""increment のユニットテスト（上限・不変化・並行実行）"""

import threading

from k1s0_correlation_vector import CorrelationVector, CorrelationVectorVersion
from structlog.testing import capture_logs


def test_increment_returns_sequential_values() -> None:
    """連続した increment が 1, 2, ..., N を返すこと。"""
    cv = CorrelationVector()
    results = [cv.increment() for _ in range(10)]
    assert results == [f"{cv.base_vector}.{i}" for i in range(1, 11)]
    assert cv.extension == 10


def test_increment_v2() -> None:
    """V2 でも increment できること。"""
    cv = CorrelationVector(CorrelationVectorVersion.V2)
    assert cv.increment().split(".")[1] == "1"


def test_increment_past_max_with_no_errors() -> None:
    """最大長を超える increment で例外にならず不変になること。"""
    cv = CorrelationVector.extend("tul4NUsfs9Cl7mOf.2147483647.2147483647.2147483647.21474836479")
    cv.increment()
    assert cv.value == "tul4NUsfs9Cl7mOf.2147483647.2147483647.2147483647.21474836479.1"
    for _ in range(20):
        cv.increment()
    assert cv.value == "tul4NUsfs9Cl7mOf.2147483647.2147483647.2147483647.21474836479.9!"
    assert cv.immutable


def test_increment_past_max_with_no_errors_v2() -> None:
    """V2 で最大長を超える increment で例外にならず不変になること。"""
    base_vector = (
        "KZY+dsX2jEaZesgCPjJ2Ng.2147483647.2147483647.2147483647.2147483647.2147483647"
        ".2147483647.2147483647.2147483647.2147483647.214"
    )
    cv = CorrelationVector.extend(base_vector)
    cv.increment()
    assert cv.value == base_vector + ".1"
    for _ in range(20):
        cv.increment()
    assert cv.value == base_vector + ".9!"


def test_overflowing_increment_returns_terminated_previous_value() -> None:
    """不変化を引き起こした increment は直前の値に終端記号を付けて返すこと。"""
    cv = CorrelationVector.parse("tul4NUsfs9Cl7mOf.2147483647.2147483647.2147483647.21474836479.9")
    assert not cv.immutable
    with capture_logs() as logs:
        result = cv.increment()
    assert result == "tul4NUsfs9Cl7mOf.2147483647.2147483647.2147483647.21474836479.9!"
    assert cv.extension == 9
    assert any(log["event"] == "Correlation vector became immutable" for log in logs)


def test_increment_on_immutable_vector_is_noop() -> None:
    """不変な相関ベクトルの increment は常に同じ値を返すこと。"""
    value = "tul4NUsfs9Cl7mOf.2147483647.2147483647.2147483647.21474836479.0!"
    cv = CorrelationVector.parse(value)
    assert [cv.increment() for _ in range(3)] == [value] * 3


def test_increment_saturates_at_max_extension() -> None:
    """extension が上限値の場合は値が変わらず不変にもならないこと。"""
    cv = CorrelationVector.parse("tul4NUsfs9Cl7mOf.2147483647")
    assert cv.increment() == "tul4NUsfs9Cl7mOf.2147483647"
    assert cv.increment() == "tul4NUsfs9Cl7mOf.2147483647"
    assert not cv.immutable


def test_increment_is_unique_across_threads() -> None:
    """複数スレッドからの increment が重複も欠番もなく値を返すこと。"""
    num_threads = 50
    per_thread = 20
    cv = CorrelationVector.extend(CorrelationVector().value)
    barrier = threading.Barrier(num_threads)
    results: list[str] = []

    def worker() -> None:
        barrier.wait()
        for _ in range(per_thread):
            results.append(cv.increment())

    threads = [threading.Thread(target=worker) for _ in range(num_threads)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    extensions = sorted(int(value.rsplit(".", 1)[1]) for value in results)
    assert extensions == list(range(1, num_threads * per_thread + 1))
    assert cv.extension == num_threads * per_thread
