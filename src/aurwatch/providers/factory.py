"""Adapter construction helpers."""

from pathlib import Path

from aurwatch.channels.base import Notifier, NullNotifier
from aurwatch.channels.telegram import TelegramNotifier
from aurwatch.config import Settings
from aurwatch.packages.aur import AurClient
from aurwatch.packages.pkginfo import PkgInfoReader
from aurwatch.packages.vercmp import AlpmVersionOracle
from aurwatch.providers.git import SubprocessGitProvider, custom_repo_url, with_credentials
from aurwatch.providers.makepkg import MakepkgSrcinfo
from aurwatch.providers.remotebuild import RemoteBuildClient
from aurwatch.updater.orchestrator import PackageUpdater
from aurwatch.updater.runner import RefreshRunner


def build_notifier(settings: Settings) -> Notifier:
    token = settings.telegram_bot_token.strip()
    chat_id = settings.telegram_chat_id.strip()
    if token and chat_id:
        return TelegramNotifier(token, chat_id)
    return NullNotifier()


def build_builder(settings: Settings) -> RemoteBuildClient:
    return RemoteBuildClient(
        settings.rbuild_url,
        username=settings.rbuild_user,
        token=settings.rbuild_token,
        dmanager_url=settings.dmanager_url,
        dmanager_user=settings.dmanager_user,
        dmanager_token=settings.dmanager_token,
    )


def build_updater(settings: Settings, notifier: Notifier | None = None) -> PackageUpdater:
    aur = AurClient(settings.aur_base_url, timeout_seconds=settings.aur_timeout_seconds)

    def custom_url(name: str) -> str:
        url = custom_repo_url(settings.git_url, settings.git_user, name)
        return with_credentials(url, settings.git_user, settings.git_token)

    return PackageUpdater(
        tmp_dir=Path(settings.tmp_dir),
        lookup=aur,
        oracle=AlpmVersionOracle(),
        git=SubprocessGitProvider(
            token=settings.git_token,
            author_name=settings.git_author_name,
            author_email=settings.git_author_email,
        ),
        build_tool=MakepkgSrcinfo(),
        builder=build_builder(settings),
        custom_url=custom_url,
        upstream_url=aur.git_url,
        notifier=notifier or build_notifier(settings),
        poll_interval_s=settings.job_poll_interval_seconds,
    )


def build_runner(settings: Settings) -> RefreshRunner:
    notifier = build_notifier(settings)
    return RefreshRunner(
        build_updater(settings, notifier),
        repo_dir=Path(settings.repo_dir),
        reader=PkgInfoReader(),
        oracle=AlpmVersionOracle(),
        notifier=notifier,
        max_concurrent=settings.update_concurrency,
    )
