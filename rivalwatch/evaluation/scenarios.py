# rivalwatch/evaluation/scenarios.py
"""
Built-in, hand-labeled before/after scenarios.

Each pair isolates one kind of change on a fictional competitor ("TestSaaS").
The markup is fixed: content hashes, and therefore the no-change fast path,
depend on it byte for byte.
"""

from __future__ import annotations

from rivalwatch.schemas.models import ExpectedChange, TestScenario

COMPETITOR = "TestSaaS"


def _page(title: str, body: str) -> str:
    return f"<html>\n<head><title>{title}</title></head>\n<body>\n{body}\n</body>\n</html>\n"


# ---------- pricing ----------

_PRICING_BODY = """<h1>Choose Your Plan</h1>
<div class="pricing-plans">
  <div class="plan">
    <h3>Starter</h3>
    <p class="price">{starter}/month</p>
    <ul>
      <li>Up to 1,000 users</li>
      <li>Basic analytics</li>
      <li>Email support</li>
    </ul>
  </div>
  <div class="plan">
    <h3>Professional</h3>
    <p class="price">{professional}/month</p>
    <ul>
      <li>Up to 10,000 users</li>
      <li>Advanced analytics</li>
      <li>Priority support</li>
      <li>Custom integrations</li>
    </ul>
  </div>
  <div class="plan">
    <h3>Enterprise</h3>
    <p class="price">Contact Sales</p>
    <ul>
      <li>Unlimited users</li>
      <li>White-label solution</li>
      <li>Dedicated support</li>
    </ul>
  </div>
</div>"""

# ---------- features ----------

_FEATURE_CARDS = """<h1>Powerful Features</h1>
<div class="features">
  <div class="feature">
    <h3>Real-time Analytics</h3>
    <p>Get instant insights into your data with our advanced analytics dashboard.</p>
  </div>
  <div class="feature">
    <h3>Team Collaboration</h3>
    <p>Work together seamlessly with built-in collaboration tools.</p>
  </div>
  <div class="feature">
    <h3>API Integration</h3>
    <p>Connect with your existing tools via our robust API.</p>
  </div>{extra}
</div>"""

_NEW_FEATURE_CARDS = """
  <div class="feature new">
    <h3>AI-Powered Insights</h3>
    <p>Leverage machine learning to discover patterns and predict trends in your data.</p>
  </div>
  <div class="feature new">
    <h3>Mobile App</h3>
    <p>Access your dashboard on the go with our new mobile application.</p>
  </div>"""

# ---------- homepage messaging ----------

_SMALL_TEAM_HERO = """<div class="hero">
  <h1>The Best Project Management Tool for Small Teams</h1>
  <p>Manage your projects efficiently with our intuitive platform designed for teams of 2-10 people.</p>
  <button>Start Free Trial</button>
</div>
<div class="features">
  <h2>Key Features</h2>
  <ul>
    <li>Task management</li>
    <li>Time tracking</li>
    <li>Team collaboration</li>
  </ul>
</div>"""

_ENTERPRISE_HERO = """<div class="hero">
  <h1>Enterprise Project Management Platform for Scaling Organizations</h1>
  <p>Transform how your enterprise manages complex projects with our AI-powered platform built for teams of 100+ people.</p>
  <button>Request Demo</button>
</div>
<div class="features">
  <h2>Key Features</h2>
  <ul>
    <li>Advanced task management</li>
    <li>AI-powered time tracking</li>
    <li>Enterprise team collaboration</li>
    <li>Advanced reporting & analytics</li>
  </ul>
</div>"""

# ---------- about page ----------

_ABOUT_BODY = """<h1>About Our Company</h1>
<p>TestSaaS was founded in 2020 with the mission to help teams work more efficiently.</p>
<p>Our team of 25 dedicated professionals works around the clock to bring you the best experience.</p>
<div class="stats">
  <p>{customers}+ happy customers</p>
  <p>99.9% uptime</p>
  <p>Last updated: {updated}</p>
</div>"""

# ---------- blog ----------

_BLOG_ARCHIVE = """  <article>
    <h2>5 Tips for Better Team Productivity</h2>
    <p>Published: Jan 10, 2024</p>
    <p>Learn how to boost your team's productivity with these simple tips...</p>
  </article>
  <article>
    <h2>Customer Success Story: How Acme Corp Increased Efficiency</h2>
    <p>Published: Jan 8, 2024</p>
    <p>Discover how Acme Corp used TestSaaS to streamline their workflow...</p>
  </article>"""

_BLOG_LAUNCH_POST = """  <article>
    <h2>Announcing TestSaaS 2.0: Major Platform Update</h2>
    <p>Published: Jan 15, 2024</p>
    <p>We're excited to announce the launch of TestSaaS 2.0 with completely redesigned interface, new AI features, and enterprise-grade security. This update represents 18 months of development...</p>
  </article>
"""


def _blog(posts: str) -> str:
    return _page("TestSaaS Blog", f'<div class="blog-posts">\n{posts}\n</div>')


DEFAULT_SCENARIOS: tuple[TestScenario, ...] = (
    TestScenario(
        id="pricing-increase",
        name="Pricing Plan Increase",
        description="Detect price increases across SaaS plans",
        page_type="pricing",
        competitor_name=COMPETITOR,
        before_html=_page("TestSaaS - Pricing", _PRICING_BODY.format(starter="$29", professional="$79")),
        after_html=_page("TestSaaS - Pricing", _PRICING_BODY.format(starter="$39", professional="$99")),
        expected=ExpectedChange(has_significant_change=True, change_type="pricing", impact_level="high"),
    ),
    TestScenario(
        id="new-feature-announcement",
        name="New Feature Announcement",
        description="Detect new features added to the features page",
        page_type="features",
        competitor_name=COMPETITOR,
        before_html=_page("TestSaaS - Features", _FEATURE_CARDS.format(extra="")),
        after_html=_page("TestSaaS - Features", _FEATURE_CARDS.format(extra=_NEW_FEATURE_CARDS)),
        expected=ExpectedChange(has_significant_change=True, change_type="features", impact_level="medium"),
    ),
    TestScenario(
        id="messaging-update",
        name="Homepage Messaging Update",
        description="Detect a repositioning from small teams to enterprise",
        page_type="homepage",
        competitor_name=COMPETITOR,
        before_html=_page("TestSaaS - The Best Project Management Tool", _SMALL_TEAM_HERO),
        after_html=_page("TestSaaS - Enterprise Project Management Platform", _ENTERPRISE_HERO),
        expected=ExpectedChange(has_significant_change=True, change_type="messaging", impact_level="high"),
    ),
    TestScenario(
        id="minor-content-update",
        name="Minor Content Update",
        description="Customer counter and date bump only; not a business change",
        page_type="about",
        competitor_name=COMPETITOR,
        before_html=_page("About TestSaaS", _ABOUT_BODY.format(customers="1,000", updated="January 15, 2024")),
        after_html=_page("About TestSaaS", _ABOUT_BODY.format(customers="1,050", updated="January 22, 2024")),
        expected=ExpectedChange(has_significant_change=False, change_type="other", impact_level="low"),
    ),
    TestScenario(
        id="blog-announcement",
        name="Product Announcement Blog Post",
        description="Detect a major product announcement on the blog",
        page_type="blog",
        competitor_name=COMPETITOR,
        before_html=_blog(_BLOG_ARCHIVE),
        after_html=_blog(_BLOG_LAUNCH_POST + _BLOG_ARCHIVE),
        expected=ExpectedChange(has_significant_change=True, change_type="product", impact_level="high"),
    ),
    TestScenario(
        id="blog-announcement-same",
        name="Unchanged Blog Page",
        description="Byte-identical markup must short-circuit to no change",
        page_type="blog",
        competitor_name=COMPETITOR,
        before_html=_blog(_BLOG_ARCHIVE),
        after_html=_blog(_BLOG_ARCHIVE),
        expected=ExpectedChange(has_significant_change=False, change_type="product", impact_level="medium"),
    ),
)


__all__ = ["COMPETITOR", "DEFAULT_SCENARIOS"]
