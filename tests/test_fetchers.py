"""Tests for recipegen.fetchers."""

from __future__ import annotations

from pathlib import Path

import pytest

from recipegen.config import RecipeGenConfig
from recipegen.fetchers import FetcherCache, FetcherInference, fetcher_to_url, url_to_fetcher
from recipegen.git import RemoteRegistrationError
from recipegen.models import HostedFetcher, UrlFetcher
from tests._fixtures.doubles import ScriptedPrompter, StubRemote


def test_github_ssh_remote_maps_to_hosted_fetcher() -> None:
    assert url_to_fetcher("git@github.com:acme/foo.git") == HostedFetcher("github", "acme/foo")


def test_gitlab_https_remote_maps_to_hosted_fetcher() -> None:
    assert url_to_fetcher("https://gitlab.com/acme/bar.git") == HostedFetcher("gitlab", "acme/bar")


def test_nested_groups_are_kept_in_the_repo_id() -> None:
    assert url_to_fetcher("git@gitlab.com:acme/tools/bar.git") == HostedFetcher(
        "gitlab", "acme/tools/bar"
    )


@pytest.mark.parametrize(
    "url",
    [
        "git@unknownhost.example:a/b.git",
        "https://github.com/acme/foo",
        "ssh://git@github.com/acme/foo.git",
        "https://codeberg.org/acme/foo.git",
        "git@github.com:acme/foo.git\n",
        "https://gitlab.com/acme/bar.git\n",
        "",
    ],
)
def test_unrecognised_remotes_fall_back_to_raw_url(url: str) -> None:
    assert url_to_fetcher(url) == UrlFetcher(url)


@pytest.mark.parametrize("use_https", [False, True])
@pytest.mark.parametrize(
    "fetcher",
    [
        HostedFetcher("github", "acme/foo"),
        HostedFetcher("gitlab", "group/sub/bar"),
        HostedFetcher("github", "acme/foo.git"),
        UrlFetcher("git@unknownhost.example:a/b.git"),
    ],
)
def test_fetcher_to_url_is_inverse_of_url_to_fetcher(fetcher, use_https: bool) -> None:
    assert url_to_fetcher(fetcher_to_url(fetcher, use_https=use_https)) == fetcher


def test_fetcher_to_url_formats() -> None:
    fetcher = HostedFetcher("gitlab", "acme/bar")

    assert fetcher_to_url(fetcher) == "git@gitlab.com:acme/bar.git"
    assert fetcher_to_url(fetcher, use_https=True) == "https://gitlab.com/acme/bar.git"
    with pytest.raises(ValueError):
        fetcher_to_url(HostedFetcher("sourcehut", "~acme/bar"))


def test_infer_uses_origin_remote(tmp_path: Path) -> None:
    prompter = ScriptedPrompter()
    inference = FetcherInference(
        RecipeGenConfig(), git=StubRemote("https://github.com/acme/foo.git"), prompter=prompter
    )

    fetcher = inference.infer(tmp_path, FetcherCache(), package="foo")

    assert fetcher == HostedFetcher("github", "acme/foo")
    assert prompter.questions == []


def test_infer_returns_cached_fetcher_without_reading_remote(tmp_path: Path) -> None:
    remote = StubRemote("git@github.com:acme/foo.git")
    inference = FetcherInference(RecipeGenConfig(), git=remote, prompter=ScriptedPrompter())
    cache = FetcherCache(fetcher=UrlFetcher("https://example.org/foo.git"))

    assert inference.infer(tmp_path, cache) == UrlFetcher("https://example.org/foo.git")
    assert remote.lookups == 0


def test_declined_registration_caches_fetcher_for_the_run(tmp_path: Path) -> None:
    remote = StubRemote()
    prompter = ScriptedPrompter(answers=["github", "acme/foo"], confirmations=[False])
    inference = FetcherInference(RecipeGenConfig(), git=remote, prompter=prompter)
    cache = FetcherCache()

    first = inference.infer(tmp_path, cache, package="foo")
    second = inference.infer(tmp_path, cache, package="bar")

    assert first == second == HostedFetcher("github", "acme/foo")
    assert cache.fetcher == first
    assert remote.added == []


def test_accepted_registration_adds_origin_without_caching(tmp_path: Path) -> None:
    remote = StubRemote()
    prompter = ScriptedPrompter(answers=["gitlab", "acme/foo"], confirmations=[True])
    config = RecipeGenConfig(use_https=True)
    inference = FetcherInference(config, git=remote, prompter=prompter)
    cache = FetcherCache()

    fetcher = inference.infer(tmp_path, cache, package="foo")

    assert fetcher == HostedFetcher("gitlab", "acme/foo")
    assert remote.added == [("origin", "https://gitlab.com/acme/foo.git")]
    assert cache.fetcher is None


def test_failed_registration_raises(tmp_path: Path) -> None:
    remote = StubRemote(fail_add=True)
    prompter = ScriptedPrompter(answers=["github", "acme/foo"], confirmations=[True])
    inference = FetcherInference(RecipeGenConfig(), git=remote, prompter=prompter)
    cache = FetcherCache()

    with pytest.raises(RemoteRegistrationError):
        inference.infer(tmp_path, cache, package="foo")
    assert cache.fetcher is None


def test_raw_url_prompt_when_git_fetcher_chosen(tmp_path: Path) -> None:
    prompter = ScriptedPrompter(answers=["git", "https://example.org/foo.git"])
    inference = FetcherInference(RecipeGenConfig(fetcher="git"), git=StubRemote(), prompter=prompter)

    fetcher = inference.infer(tmp_path, FetcherCache(), package="foo")

    assert fetcher == UrlFetcher("https://example.org/foo.git")
    assert prompter.defaults[0] == "git"


def test_repo_prompt_is_prefilled_from_user(tmp_path: Path) -> None:
    prompter = ScriptedPrompter(answers=["github", "hacker/foo"])
    inference = FetcherInference(RecipeGenConfig(user="hacker"), git=StubRemote(), prompter=prompter)

    inference.infer(tmp_path, FetcherCache(), package="foo")

    assert prompter.defaults == ["github", "hacker/foo"]


def test_cancelled_prompt_returns_none(tmp_path: Path) -> None:
    prompter = ScriptedPrompter(answers=["github", None])
    inference = FetcherInference(RecipeGenConfig(), git=StubRemote(), prompter=prompter)
    cache = FetcherCache()

    assert inference.infer(tmp_path, cache, package="foo") is None
    assert cache.fetcher is None
