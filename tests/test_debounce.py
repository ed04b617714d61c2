import asyncio

from order_ui.sync.debounce import SearchDebouncer


class Recorder:
    def __init__(self, failures: int = 0) -> None:
        self.terms: list[str] = []
        self.failures = failures

    async def __call__(self, term: str) -> bool:
        self.terms.append(term)
        if self.failures:
            self.failures -= 1
            return False
        return True


class TestSearchDebouncer:
    def test_only_final_value_is_committed(self):
        async def scenario():
            commits = Recorder()
            debouncer = SearchDebouncer(commits, delay=0.05)
            for text in ("j", "jo", "joh", "john"):
                debouncer.push(text)
                await asyncio.sleep(0.005)
            assert debouncer.pending
            await debouncer.settled()

            assert commits.terms == ["john"]
            assert debouncer.committed == "john"
            assert not debouncer.pending

        asyncio.run(scenario())

    def test_unchanged_value_is_not_recommitted(self):
        async def scenario():
            commits = Recorder()
            debouncer = SearchDebouncer(commits, delay=0.01)
            debouncer.push("john")
            await debouncer.settled()
            debouncer.push("  john ")
            await debouncer.settled()
            debouncer.push("")
            await debouncer.settled()

            assert commits.terms == ["john", ""]

        asyncio.run(scenario())

    def test_initial_value_counts_as_committed(self):
        async def scenario():
            commits = Recorder()
            debouncer = SearchDebouncer(commits, delay=0.01, initial="")
            debouncer.push("  ")
            await debouncer.settled()
            assert commits.terms == []

        asyncio.run(scenario())

    def test_flush_commits_immediately(self):
        async def scenario():
            commits = Recorder()
            debouncer = SearchDebouncer(commits, delay=10)
            debouncer.push("priya")
            assert await debouncer.flush() is True
            assert commits.terms == ["priya"]
            assert not debouncer.pending
            assert await debouncer.flush() is False

        asyncio.run(scenario())

    def test_cancel_drops_pending_commit(self):
        async def scenario():
            commits = Recorder()
            debouncer = SearchDebouncer(commits, delay=0.01)
            debouncer.push("meera")
            debouncer.cancel()
            await asyncio.sleep(0.03)
            await debouncer.settled()
            assert commits.terms == []

        asyncio.run(scenario())

    def test_keystroke_during_commit_does_not_cancel_it(self):
        async def scenario():
            release = asyncio.Event()
            terms = []

            async def slow_commit(term):
                terms.append(term)
                await release.wait()
                return True

            debouncer = SearchDebouncer(slow_commit, delay=0.01)
            debouncer.push("jo")
            await asyncio.sleep(0.03)
            assert terms == ["jo"]

            debouncer.push("john")
            release.set()
            await debouncer.settled()
            assert terms == ["jo", "john"]

        asyncio.run(scenario())

    def test_failed_commit_can_be_retried(self):
        async def scenario():
            commits = Recorder(failures=1)
            debouncer = SearchDebouncer(commits, delay=0.01)
            debouncer.push("john")
            await debouncer.settled()
            assert debouncer.committed == ""

            assert await debouncer.flush() is True
            assert commits.terms == ["john", "john"]
            assert debouncer.committed == "john"

        asyncio.run(scenario())

    def test_failed_commit_rolls_back_to_last_applied_term(self):
        async def scenario():
            commits = Recorder()
            debouncer = SearchDebouncer(commits, delay=0.01)
            debouncer.push("jo")
            await debouncer.settled()
            commits.failures = 1
            debouncer.push("john")
            await debouncer.settled()
            assert debouncer.committed == "jo"

            debouncer.push("john")
            await debouncer.settled()
            assert commits.terms == ["jo", "john", "john"]
            assert debouncer.committed == "john"

        asyncio.run(scenario())
