import sys
import threading
import time

from snowmint.generator import IdGenerator

COUNT = 1_000_000
THREADS = 4


def single_thread():
    generator = IdGenerator(0, 0)
    start = time.perf_counter()
    for _ in generator.iter_ids(COUNT):
        pass
    elapsed = time.perf_counter() - start
    print(f"1 thread: {COUNT} ids in {elapsed:.2f}s ({COUNT / elapsed:,.0f} ids/s)")


def multi_thread():
    generator = IdGenerator(0, 0)
    per_thread = COUNT // THREADS
    results: list[list[int]] = []

    def worker():
        results.append(list(generator.iter_ids(per_thread)))

    threads = [threading.Thread(target=worker) for _ in range(THREADS)]
    start = time.perf_counter()
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    elapsed = time.perf_counter() - start

    total = sum(len(r) for r in results)
    unique = len({id for r in results for id in r})
    print(f"{THREADS} threads: {total} ids in {elapsed:.2f}s ({total / elapsed:,.0f} ids/s)")
    if unique != total:
        print(f"❌ {total - unique} duplicate ids")
        sys.exit(1)
    print("✅ All ids unique")


if __name__ == "__main__":
    single_thread()
    multi_thread()
