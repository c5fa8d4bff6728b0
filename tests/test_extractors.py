"""Tests for the board extractors, run against saved page fragments."""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from role_tracker.exceptions import ExtractionError
from role_tracker.models import utcnow
from role_tracker.scrapers.a16z import A16zExtractor
from role_tracker.scrapers.a16z_api import A16Z_API_URL, A16zApiExtractor, seniority_to_level
from role_tracker.scrapers.ashby import AshbyExtractor, company_from_board_url
from role_tracker.scrapers.base import Candidate
from role_tracker.scrapers.generic_vc import GenericVCExtractor
from role_tracker.scrapers.wellfound import WellfoundExtractor
from role_tracker.scrapers.workatastartup import WorkAtAStartupExtractor
from role_tracker.scrapers.ycombinator import YCombinatorExtractor

YC_CARD = """
<li class="my-2">
  <div class="flex w-full">
    <div class="ml-4">
      <a href="/companies/coast"><span>Coast (S21)</span> • <span>Demo platform</span> <span>(10 days ago)</span></a>
      <a class="text-linkColor" href="/companies/coast/jobs/abc-senior-backend">Senior Backend Engineer</a>
      <div class="flex flex-wrap">Full-time • Remote (US) • $150K - $200K • 0.10% - 0.50%</div>
    </div>
  </div>
  <div class="flex">
    <a href="https://account.ycombinator.com/authenticate?continue=https%3A%2F%2Fwww.workatastartup.com%2Fapplication%3Fsignup_job_id%3D{job_id}">Apply</a>
  </div>
</li>
"""

YC_UNLABELLED_CARD = """
<li>
  <div>
    <div>
      <a href="/companies/mystery">Mystery Corp</a>
      <a class="text-linkColor" href="/companies/mystery/jobs/x">Senior Backend Engineer</a>
    </div>
  </div>
  <div><a href="https://account.ycombinator.com/?signup_job_id%3D777">Apply</a></div>
</li>
"""

A16Z_CARD = """
<div class="job-list-job-details">
  <a class="job-list-job-company-link" href="/companies/figma">Figma</a>
  <div class="job-list-job-title"><a href="https://boards.greenhouse.io/figma/jobs/123">Senior Product Designer</a></div>
  <div>San Francisco, California, USA</div>
  <div>Posted 3 days ago</div>
  <div>Design Tools</div>
  <div>1000-5000 employees</div>
</div>
"""

API_JOB = {
    "jobId": 987,
    "title": "Staff Software Engineer, Infrastructure",
    "companyName": "Databricks",
    "companyDomain": "databricks.com",
    "companyStaffCount": 5000,
    "applyUrl": "https://www.databricks.com/company/careers/open-positions/job?gh_jid=987",
    "normalizedLocations": [{"label": "San Francisco, CA, USA"}],
    "locations": ["SF"],
    "remote": False,
    "hybrid": True,
    "salary": {
        "minValue": 265000,
        "maxValue": 340000,
        "currency": {"value": "USD"},
        "period": {"value": "year"},
    },
    "jobSeniorities": [{"value": "senior"}],
    "timeStamp": "2024-05-30T10:00:00Z",
    "departments": ["Engineering"],
    "jobTypes": [{"label": "Software Engineer"}],
    "skills": [{"label": "Python"}, {"label": "Kubernetes"}],
}

GARBAGE_DOCUMENTS = ["", "<<<>>> not html at all", "<html><body><p>Nothing here</p></body></html>"]


def yc_page(*cards):
    return "<html><body><ul>" + "".join(cards) + "</ul></body></html>"


class TestYCombinatorExtractor:
    """Test YC apply-button parsing and the link fallback."""

    @pytest.fixture
    def extractor(self):
        return YCombinatorExtractor()

    def test_apply_button_card(self, extractor):
        records = extractor.extract(yc_page(YC_CARD.format(job_id="65432")))

        assert len(records) == 1
        role, source = records[0].role, records[0].source
        assert role.company_name == "Coast"
        assert role.role_title == "Senior Backend Engineer"
        assert role.funding_stage == "YC S21"
        assert role.company_description == "Demo platform"
        assert role.location == "Remote (US)"
        assert role.work_mode == "Remote"
        assert role.role_level == "Senior"
        assert role.salary_min == 150000
        assert role.salary_max == 200000
        assert role.salary_currency == "USD"
        assert role.offers_equity is True
        age = utcnow() - role.posting_date
        assert timedelta(days=9) < age < timedelta(days=11)

        assert source.source == "ycombinator"
        assert source.source_role_id == "65432"
        assert source.application_url == "https://www.workatastartup.com/companies?signup_job_id=65432"
        assert source.raw_payload["company_url"] == "/companies/coast"

    def test_repeated_cards_are_deduplicated(self, extractor):
        card = YC_CARD.format(job_id="65432")
        records = extractor.extract(yc_page(card, card, YC_CARD.format(job_id="1")))
        assert [r.source.source_role_id for r in records] == ["65432", "1"]

    def test_cards_without_batch_label_are_skipped(self, extractor):
        records = extractor.extract(yc_page(YC_UNLABELLED_CARD, YC_CARD.format(job_id="5")))
        assert [r.role.company_name for r in records] == ["Coast"]

    def test_falls_back_to_job_links(self, extractor):
        html = """
        <div class="listing">
          <a href="/companies/acme/jobs/xyz-backend">Backend Engineer at Acme</a>
        </div>
        """
        records = extractor.extract(html)

        assert len(records) == 1
        assert records[0].role.company_name == "Acme"
        assert (
            records[0].source.application_url
            == "https://www.ycombinator.com/companies/acme/jobs/xyz-backend"
        )

    def test_static_fetch(self, extractor):
        assert extractor.requires_browser is False


class TestA16zExtractor:
    """Test the rendered a16z board."""

    def test_target_url_filters(self):
        assert A16zExtractor().target_url() == (
            "https://jobs.a16z.com/jobs?jobTypes=Software+Engineer&postedSince=P7D"
        )

    def test_target_url_without_filters(self):
        extractor = A16zExtractor(job_types=[], posted_since="")
        assert extractor.target_url() == "https://jobs.a16z.com/jobs"

    def test_scrolls_for_more_cards(self):
        options = A16zExtractor().fetch_options
        assert options.scroll_to_load is True
        assert options.wait_for_selector == ".job-list-job-details"

    def test_card(self):
        records = A16zExtractor().extract(f"<html><body>{A16Z_CARD}</body></html>")

        assert len(records) == 1
        role = records[0].role
        assert role.company_name == "Figma"
        assert role.role_title == "Senior Product Designer"
        assert role.industry == "Design Tools"
        assert role.funding_stage is None
        assert role.company_size == "1000-5000 employees"
        assert role.work_mode == "Onsite"
        assert role.location.endswith("USA")
        assert role.compensation_text == "Not specified"
        assert records[0].source.source == "a16z"
        assert records[0].source.application_url == "https://boards.greenhouse.io/figma/jobs/123"

    def test_remote_card(self):
        card = A16Z_CARD.replace("San Francisco, California, USA", "Remote, USA")
        records = A16zExtractor().extract(card)
        assert records[0].role.work_mode == "Remote"

    def test_card_without_company_is_skipped(self):
        card = A16Z_CARD.replace('<a class="job-list-job-company-link" href="/companies/figma">Figma</a>', "")
        assert A16zExtractor().extract(card) == []


class TestA16zApiExtractor:
    """Test the a16z JSON API extractor."""

    @pytest.fixture
    def extractor(self):
        return A16zApiExtractor()

    def test_parse_job(self, extractor):
        candidate = extractor.parse_job(API_JOB)

        assert candidate.source_role_id == "987"
        assert candidate.company == "Databricks"
        assert candidate.company_domain == "databricks.com"
        assert candidate.location == "San Francisco, CA, USA"
        assert candidate.work_mode == "Hybrid"
        assert candidate.role_level == "Senior"
        assert candidate.salary_min == 265000
        assert candidate.salary_max == 340000
        assert candidate.salary_currency == "USD"
        assert candidate.compensation == "USD 265,000 - 340,000/year"
        assert candidate.industry == "Engineering"
        assert candidate.company_size == "5000 employees"
        assert candidate.posting_date == datetime(2024, 5, 30, 10, 0, tzinfo=timezone.utc)
        assert candidate.raw_payload["skills"] == ["Python", "Kubernetes"]

    def test_extract(self, extractor):
        records = extractor.extract(json.dumps({"jobs": [API_JOB], "total": 1}))

        assert len(records) == 1
        role, source = records[0].role, records[0].source
        assert role.compensation_text == "USD 265,000 - 340,000/year"
        assert role.salary_min == 265000
        assert source.source == "a16z"
        assert source.source_role_id == "987"
        assert source.application_url == API_JOB["applyUrl"]

    def test_location_fallbacks(self, extractor):
        job = dict(API_JOB, normalizedLocations=[], remote=True, hybrid=False)
        candidate = extractor.parse_job(job)
        assert candidate.location == "SF"
        assert candidate.work_mode == "Remote"

        job = dict(API_JOB, normalizedLocations=[], locations=[], remote=False, hybrid=False)
        assert extractor.parse_job(job).work_mode is None

    def test_malformed_jobs_are_skipped(self, extractor):
        broken = {"jobId": 5, "title": "Data Engineer", "normalizedLocations": [None]}
        records = extractor.extract(json.dumps({"jobs": [broken, API_JOB]}))
        assert [r.source.source_role_id for r in records] == ["987"]

    def test_non_object_rows_are_skipped(self, extractor):
        records = extractor.extract(json.dumps({"jobs": ["not-a-job", 42, API_JOB]}))
        assert [r.source.source_role_id for r in records] == ["987"]

    def test_rendered_and_api_records_share_role_identity(self, extractor):
        rendered = A16zExtractor().extract(A16Z_CARD)[0]
        job = dict(
            API_JOB,
            jobId=123,
            companyName="Figma",
            title="Senior Product Designer",
            applyUrl="https://boards.greenhouse.io/figma/jobs/123",
        )
        api = extractor.extract(json.dumps({"jobs": [job]}))[0]

        assert api.role.identity == rendered.role.identity
        assert api.source.source == rendered.source.source == "a16z"
        # Source keys differ, so switching extractors adds a RoleSource to the same Role
        assert api.source.source_role_id == "123"
        assert rendered.source.source_role_id == "https://boards.greenhouse.io/figma/jobs/123"

    def test_invalid_json(self, extractor):
        with pytest.raises(ExtractionError):
            extractor.extract("<html>rate limited</html>")

    def test_unexpected_payload(self, extractor):
        with pytest.raises(ExtractionError):
            extractor.extract("[1, 2, 3]")

    def test_empty_document(self, extractor):
        assert extractor.extract("") == []

    def test_load_posts_search_payload(self, extractor):
        fetcher = Mock()
        fetcher.post_json.return_value = {"jobs": [API_JOB]}

        records = extractor.scrape(fetcher)

        url, payload = fetcher.post_json.call_args[0]
        assert url == A16Z_API_URL
        assert payload["meta"] == {"size": 500}
        assert payload["board"] == {"id": "andreessen-horowitz", "isParent": True}
        assert len(records) == 1

    def test_load_needs_post_support(self, extractor):
        fetcher = Mock(spec=["load"])
        with pytest.raises(ExtractionError):
            extractor.load(fetcher)

    def test_seniority_mapping(self):
        assert seniority_to_level("Entry Level", "Engineer") == "Entry"
        assert seniority_to_level("Mid Level", "Engineer") == "Mid"
        assert seniority_to_level("Expert", "Engineer") == "Senior"
        assert seniority_to_level(None, "Junior Engineer") == "Entry"


class TestWorkAtAStartupExtractor:
    def test_job_card(self):
        html = """
        <div class="job-card">
          <h3>Founding Full Stack Engineer</h3>
          <span class="company">Helix</span>
          <span class="location">San Francisco, CA</span>
          <span class="salary">$140K - $180K</span>
          <a href="/jobs/4242">View</a>
        </div>
        """
        records = WorkAtAStartupExtractor().extract(html)

        assert len(records) == 1
        role, source = records[0].role, records[0].source
        assert role.company_name == "Helix"
        assert role.role_title == "Founding Full Stack Engineer"
        assert role.work_mode == "Onsite"
        assert role.salary_min == 140000
        assert role.salary_max == 180000
        assert source.source == "workatastartup"
        assert source.application_url == "https://www.workatastartup.com/jobs/4242"


class TestWellfoundExtractor:
    def test_job_card(self):
        html = """
        <div class="styles_JobCard__x1">
          <h2>Machine Learning Engineer</h2>
          <div class="styles_companyName__y2">Vectorly</div>
          <span class="styles_location__z3">Remote</span>
          <a href="/jobs/123-machine-learning-engineer">Apply</a>
        </div>
        """
        records = WellfoundExtractor().extract(html)

        assert len(records) == 1
        role = records[0].role
        assert role.company_name == "Vectorly"
        assert role.work_mode == "Remote"
        assert records[0].source.source == "wellfound"
        assert records[0].source.application_url == (
            "https://wellfound.com/jobs/123-machine-learning-engineer"
        )


class TestAshbyExtractor:
    """Test the hosted Ashby board extractor."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://perplexity.ashbyhq.com", "Perplexity"),
            ("https://jobs.ashbyhq.com/linear", "Linear"),
            ("https://jobs.ashbyhq.com/open-ai/", "Open Ai"),
            ("https://jobs.ashbyhq.com/", None),
            ("https://example.com/careers", None),
        ],
    )
    def test_company_from_board_url(self, url, expected):
        assert company_from_board_url(url) == expected

    def test_posting_inside_link(self):
        html = """
        <a href="/perplexity/0b1c2d3e-4f50" class="ashby-container">
          <div class="ashby-job-posting-brief">
            <h3 class="posting-heading">Senior Software Engineer, Search</h3>
            <p class="posting-location">San Francisco</p>
          </div>
        </a>
        """
        extractor = AshbyExtractor("Perplexity", "https://jobs.ashbyhq.com/perplexity")

        records = extractor.extract(html)

        assert len(records) == 1
        role, source = records[0].role, records[0].source
        assert role.company_name == "Perplexity"
        assert role.role_level == "Senior"
        assert role.location == "San Francisco"
        assert source.application_url == "https://jobs.ashbyhq.com/perplexity/0b1c2d3e-4f50"
        assert source.source == "perplexity"


class TestGenericVCExtractor:
    """Test the layered portfolio-board extractor."""

    HTML = """
    <div class="job-listing">
      <h3>Platform Engineer</h3>
      <span class="company">Acme Robotics</span>
      <a href="https://acme.example.com/jobs/77">Details</a>
    </div>
    <div class="job-listing">
      <h3>Product Designer, Growth</h3>
      <span class="company">Brightline</span>
      <span class="location">New York, NY</span>
      <a href="https://brightline.example.com/jobs/12">Details</a>
    </div>
    """

    @pytest.fixture
    def extractor(self):
        return GenericVCExtractor("Sequoia Capital", "https://jobs.sequoiacap.com/jobs", funding_stage="Seed")

    def test_work_mode_defaults(self, extractor):
        records = extractor.extract(self.HTML)

        by_company = {r.role.company_name: r.role for r in records}
        assert set(by_company) == {"Acme Robotics", "Brightline"}
        assert by_company["Acme Robotics"].location == "Remote"
        assert by_company["Acme Robotics"].work_mode == "Remote"
        assert by_company["Brightline"].work_mode == "Hybrid"

    def test_funding_stage_is_stamped(self, extractor):
        records = extractor.extract(self.HTML)
        assert {r.role.funding_stage for r in records} == {"Seed"}
        assert {r.source.source for r in records} == {"sequoia-capital"}

    def test_company_from_link_path(self, extractor):
        html = """
        <div class="job-row">
          <h3>Senior Backend Engineer</h3>
          <a href="https://board.example.com/stripe/jobs/991">Apply now</a>
        </div>
        """
        records = extractor.extract(html)
        assert [r.role.company_name for r in records] == ["Stripe"]

    def test_unresolved_company_is_rejected(self, extractor):
        html = """
        <div class="job-row">
          <h3>Senior Backend Engineer</h3>
          <a href="https://board.example.com/jobs/991">Apply now</a>
        </div>
        """
        assert extractor.extract(html) == []

    def test_hyphenated_title_is_not_a_company(self):
        aggregator = GenericVCExtractor("Startup Jobs", "https://startup.jobs")
        candidate = Candidate(
            title="Full-Stack Software Engineer",
            link="https://startup.jobs/full-stack-software-engineer-123",
        )
        assert aggregator.build_record(candidate) is None


@pytest.mark.parametrize("document", GARBAGE_DOCUMENTS)
@pytest.mark.parametrize(
    "extractor",
    [
        YCombinatorExtractor(),
        A16zExtractor(),
        WorkAtAStartupExtractor(),
        WellfoundExtractor(),
        AshbyExtractor("Linear", "https://jobs.ashbyhq.com/linear"),
        GenericVCExtractor("Index Ventures", "https://www.indexventures.com/startup-jobs"),
    ],
    ids=lambda extractor: extractor.source,
)
def test_unexpected_markup_yields_nothing(extractor, document):
    assert extractor.extract(document) == []
