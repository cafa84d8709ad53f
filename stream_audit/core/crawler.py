"""
Sites → pages → web parts traversal for Stream (Classic) embeds.

The crawl is strictly sequential: one Graph request in flight at a time,
each one wrapped by :class:`~stream_audit.core.retry.RequestRetrier`.
"""

from dataclasses import dataclass, field
from pathlib import Path

from tqdm import tqdm as _tqdm

from ..classify import matches
from ..config import CrawlConfig
from ..errors import MalformedPayload
from ..logging_setup import log
from ..models import Component, MatchRecord, Page, Site, serialize_owner
from ..network.client import next_link, normalise_collection
from ..network.paths import owner_path, pages_path, sites_path, webparts_path
from .retry import RequestRetrier
from .sink import ResultSink


@dataclass
class CrawlSummary:
    listing_pages: int = 0
    sites: int = 0
    skipped_sites: int = 0
    pages: int = 0
    components: int = 0
    matches: int = 0
    ownerless: int = 0
    malformed: int = 0
    rows: int = 0
    files: list[Path] = field(default_factory=list)


class Crawler:
    """Walks every site page and hands matching web parts to a ResultSink."""

    def __init__(self, config: CrawlConfig, retrier: RequestRetrier, sink: ResultSink) -> None:
        self.config = config
        self.retrier = retrier
        self.sink = sink
        self.summary = CrawlSummary()
        self._owners: dict[str, str] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> CrawlSummary:
        """
        Crawl every page of the sites listing and write matches to the sink.

        The sink is rolled over after each listing page, so each page of
        sites with at least one match ends up in its own result file.
        Pagination stops when the API returns no next link or when
        ``pages * page_size`` reaches the configured result cap.

        Returns:
            Counters for the run, including the finished result files.

        Raises:
            TransportError: a non-retryable request failure.
            FatalError: retries for a single request were exhausted.
            StorageError: an upload failed and the policy is ``abort``.
        """
        cap = self.config.result_cap
        log.info("Output directory : %s", self.config.output_dir.resolve())
        if self.config.site_id:
            log.info("Single site      : %s", self.config.site_id)
        log.info("Page size        : %d  (result cap: %s)", self.config.page_size, cap or "none")

        path: str | None = sites_path(self.config.page_size, self.config.site_id)
        while path:
            body = self.retrier.execute(path)
            self.summary.listing_pages += 1
            sites = [Site.from_json(item) for item in normalise_collection(body)]
            log.info("Sites page %d: %d site(s)", self.summary.listing_pages, len(sites))

            bar = _tqdm(
                sites,
                desc=f"Sites page {self.summary.listing_pages}",
                unit="site",
                dynamic_ncols=True,
                leave=False,
                disable=not self.config.progress or self.config.verbose,
            )
            for site in bar:
                self._process_site(site)
                bar.set_postfix(matches=self.summary.matches)
            bar.close()

            self.sink.rollover()

            path = next_link(body)
            if cap and self.summary.listing_pages * self.config.page_size >= cap:
                if path:
                    log.info("Result cap of %d reached – stopping", cap)
                break

        self.summary.files = list(self.sink.completed)
        self.summary.rows = self.sink.rows_written
        log.info(
            "Crawl complete. sites=%d  skipped=%d  pages=%d  webparts=%d  "
            "matches=%d  ownerless=%d  malformed=%d  rows=%d  files=%d",
            self.summary.sites,
            self.summary.skipped_sites,
            self.summary.pages,
            self.summary.components,
            self.summary.matches,
            self.summary.ownerless,
            self.summary.malformed,
            self.summary.rows,
            len(self.summary.files),
        )
        return self.summary

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _process_site(self, site: Site) -> None:
        """Visit every page of *site*; unnamed system sites are skipped without a request."""
        if not site.name:
            # system sites (search centre, app catalog …) come back without a name
            log.debug("Skipping unnamed site %s", site.id)
            self.summary.skipped_sites += 1
            return
        self.summary.sites += 1
        log.debug("Site %s (%s)", site.name, site.web_url)

        try:
            body = self.retrier.execute(pages_path(site.id))
        except MalformedPayload:
            self.summary.malformed += 1
            return
        pages = [Page.from_json(item) for item in normalise_collection(body)]
        if not pages:
            log.debug("Site %s has no pages", site.web_url)
        for page in pages:
            self._process_page(site, page)

    def _process_page(self, site: Site, page: Page) -> None:
        self.summary.pages += 1
        try:
            body = self.retrier.execute(webparts_path(site.id, page.id))
        except MalformedPayload:
            self.summary.malformed += 1
            return
        components = [Component.from_json(item) for item in normalise_collection(body)]
        for component in components:
            self.summary.components += 1
            if not matches(component):
                continue
            try:
                self._record_match(site, page, component)
            except MalformedPayload:
                self.summary.malformed += 1
                continue

    def _record_match(self, site: Site, page: Page, component: Component) -> None:
        """Look up the site owner and emit a MatchRecord; ownerless sites are not reported."""
        log.info("[MATCH] %s / %s – %s", site.name, page.name, component.title or "(untitled)")
        owner = self._site_owner(site)
        if not owner:
            log.warning("No owner found for site %s – match not reported", site.web_url)
            self.summary.ownerless += 1
            return
        self.sink.accept(MatchRecord.build(site, owner, page, component))
        self.summary.matches += 1

    def _site_owner(self, site: Site) -> str:
        """
        Return the serialized owner of *site*.

        Fetched once per match unless ``cache_owners`` is set.

        Args:
            site: The site that holds the matching web part.

        Returns:
            Comma-separated owner labels, or ``""`` when the site has none.
        """
        if self.config.cache_owners and site.id in self._owners:
            return self._owners[site.id]
        body = self.retrier.execute(owner_path(site.id))
        owner = serialize_owner(body.get("owner") if isinstance(body, dict) else body)
        if self.config.cache_owners:
            self._owners[site.id] = owner
        return owner
