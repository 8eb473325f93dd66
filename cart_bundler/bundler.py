"""Bundle orchestration.

Validates a :class:`~cart_bundler.request.BundleRequest`, then produces every
requested output independently. Outputs share no state and write distinct
paths, so they run concurrently in a small thread pool. A failing output does
not stop the others; failures are collected and raised together at the end.
"""

from concurrent.futures import Future, ThreadPoolExecutor
import logging
import pathlib
import time
from typing import Callable

from cart_bundler.config import BundlerConfig
from cart_bundler.errors import BundleError, BundleFailedError
from cart_bundler.native import bundle_executable
from cart_bundler.page import HtmlComposer
from cart_bundler.request import Artifact, BundleRequest
from cart_bundler.template import FileTemplateRenderer, TemplateRenderer


def _plan_jobs(
    *,
    cart_file: pathlib.Path,
    request: BundleRequest,
    config: BundlerConfig,
    renderer: TemplateRenderer,
    logger: logging.Logger,
) -> list[tuple[str, pathlib.Path, Callable[[], Artifact]]]:
    """Turn a request into one job per output.

    :returns: ``(kind, output path, job)`` tuples in request order (html first).
    """

    jobs: list[tuple[str, pathlib.Path, Callable[[], Artifact]]] = []

    if request.html is not None:
        html_file: pathlib.Path = request.html
        composer: HtmlComposer = HtmlComposer(config=config, renderer=renderer, logger=logger)

        def _html_job() -> Artifact:
            return composer.bundle(cart_file=cart_file, output_file=html_file, options=request.options)

        jobs.append(("html", html_file, _html_job))

    for platform, output_file in request.natives.items():
        runtime_file: pathlib.Path = config.natives_dir / platform.runtime_filename

        def _native_job(
            runtime_file: pathlib.Path = runtime_file,
            output_file: pathlib.Path = output_file,
            kind: str = platform.value,
        ) -> Artifact:
            return bundle_executable(
                cart_file=cart_file,
                runtime_file=runtime_file,
                output_file=output_file,
                title=request.options.title,
                kind=kind,
                logger=logger,
            )

        jobs.append((platform.value, output_file, _native_job))

    return jobs


def bundle(
    *,
    cart_file: pathlib.Path,
    request: BundleRequest,
    config: BundlerConfig,
    renderer: TemplateRenderer | None = None,
    logger: logging.Logger | None = None,
    jobs: int | None = None,
) -> list[Artifact]:
    """Produce every output named in ``request``.

    :param cart_file: Cartridge path.
    :param request: Requested outputs and shared metadata.
    :param config: Bundler configuration (asset locations, generator identity).
    :param renderer: Template renderer; defaults to the config's template directory.
    :param logger: Optional logger for progress output.
    :param jobs: Maximum number of outputs built concurrently (defaults to all).
    :returns: Written artifacts, in request order.
    :raises ConfigurationError: If no output was requested (before any I/O).
    :raises BundleFailedError: If at least one output failed; the rest were still attempted.
    """

    if logger is None:
        logger = logging.getLogger("cart_bundler")

    request.validate()

    if jobs is not None and jobs < 1:
        raise BundleError(f"Invalid jobs={jobs}; expected 1 or more.")

    if renderer is None:
        renderer = FileTemplateRenderer(config.template_dir)

    planned: list[tuple[str, pathlib.Path, Callable[[], Artifact]]] = _plan_jobs(
        cart_file=cart_file,
        request=request,
        config=config,
        renderer=renderer,
        logger=logger,
    )
    logger.info(f"cart-bundler: cart={cart_file} outputs={len(planned)}")

    max_workers: int = len(planned) if jobs is None else min(jobs, len(planned))
    artifacts: list[Artifact] = []
    failures: list[tuple[str, pathlib.Path, BaseException]] = []

    t0: float = time.perf_counter()
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="cart_bundler") as pool:
        futures: list[tuple[str, pathlib.Path, Future[Artifact]]] = [
            (kind, path, pool.submit(job)) for kind, path, job in planned
        ]
        for kind, path, future in futures:
            try:
                artifact: Artifact = future.result()
            except BundleError as exc:
                logger.error(f"cart-bundler: failed to bundle {kind} {path}: {exc}")
                failures.append((kind, path, exc))
                continue
            except Exception as exc:
                # Unexpected errors still belong to one output; keep the traceback at DEBUG.
                logger.error(f"cart-bundler: failed to bundle {kind} {path}: {type(exc).__name__}: {exc}")
                logger.debug("cart-bundler: traceback", exc_info=exc)
                failures.append((kind, path, exc))
                continue
            logger.info(f"OK! Bundled {artifact.path}.")
            artifacts.append(artifact)
    t1: float = time.perf_counter()

    if len(failures) > 0:
        raise BundleFailedError(failures)

    logger.debug(f"cart-bundler: done in {t1 - t0:.2f}s")
    return artifacts
