"""Unit tests for smart insight generation"""

from datetime import datetime
from homefin.domain.insights import generate_smart_insights, sort_insights
from homefin.domain.models import Budget, Income, Insight

THIS_MONTH = datetime(2025, 3, 10)
LAST_MONTH = datetime(2025, 2, 10)


def make_income(amount: float, date: datetime = THIS_MONTH) -> Income:
    return Income(amount=amount, source="Employer", type="salary", date=date)


def titles(insights: list[Insight]) -> list[str]:
    return [i.title for i in insights]


def test_sort_insights_is_stable_by_priority():
    """Test high before medium before low, input order kept within a tier"""
    insights = [
        Insight(type="tip", title="a", description="", priority="low", actionable=False),
        Insight(type="warning", title="b", description="", priority="high", actionable=True),
        Insight(type="tip", title="c", description="", priority="medium", actionable=False),
        Insight(type="warning", title="d", description="", priority="high", actionable=True),
    ]

    assert titles(sort_insights(insights)) == ["b", "d", "c", "a"]


def test_no_data_no_insights(now):
    assert generate_smart_insights([], [], [], now=now) == []


def test_spending_increase_over_20_percent_is_high(expense_factory, now):
    expenses = [
        expense_factory(100, date=LAST_MONTH),
        expense_factory(130, date=THIS_MONTH),
    ]

    insights = generate_smart_insights(expenses, [], [], now=now)

    increase = insights[0]
    assert increase.type == "warning"
    assert increase.title == "Spending Increased"
    assert increase.priority == "high"
    assert increase.description == "Your spending is 30.0% higher than last month"
    assert increase.action.target == "/expenses"


def test_spending_decrease_is_medium_savings(expense_factory, now):
    expenses = [
        expense_factory(100, date=LAST_MONTH),
        expense_factory(85, date=THIS_MONTH),
    ]

    insights = generate_smart_insights(expenses, [], [], now=now)

    progress = [i for i in insights if i.title == "Great Progress!"]
    assert len(progress) == 1
    assert progress[0].type == "savings"
    assert progress[0].priority == "medium"
    assert "15.0% lower" in progress[0].description


def test_small_spending_change_is_ignored(expense_factory, now):
    expenses = [
        expense_factory(100, date=LAST_MONTH),
        expense_factory(105, date=THIS_MONTH),
    ]

    insights = generate_smart_insights(expenses, [], [], now=now)

    assert "Spending Increased" not in titles(insights)


def test_budget_alerts(now):
    """Test only budgets past 90% alert; over 100% is high"""
    budgets = [
        Budget(category="Food", amount=100, spent=95),
        Budget(category="Fun", amount=100, spent=120),
        Budget(category="Transport", amount=100, spent=90),
    ]

    insights = generate_smart_insights([], [], budgets, now=now)

    assert titles(insights) == ["Fun Budget Alert", "Food Budget Alert"]
    assert [i.priority for i in insights] == ["high", "medium"]
    assert insights[1].description == "You've used 95% of your Food budget"


def test_good_savings_rate(expense_factory, now):
    insights = generate_smart_insights(
        [expense_factory(700, date=THIS_MONTH)], [make_income(1000)], [], now=now
    )

    savings = [i for i in insights if i.title == "Excellent Savings Rate"]
    assert len(savings) == 1
    assert savings[0].actionable is False
    assert savings[0].action is None
    assert "30.0%" in savings[0].description


def test_low_savings_rate_links_to_budgets(expense_factory, now):
    insights = generate_smart_insights(
        [expense_factory(950, date=THIS_MONTH)], [make_income(1000)], [], now=now
    )

    tip = [i for i in insights if i.title == "Consider Increasing Savings"]
    assert len(tip) == 1
    assert tip[0].type == "tip"
    assert tip[0].actionable is True
    assert tip[0].action.target == "/budgets"


def test_savings_rate_dead_zone(expense_factory, now):
    """Test a 10-20% savings rate produces no savings insight"""
    insights = generate_smart_insights(
        [expense_factory(850, date=THIS_MONTH)], [make_income(1000)], [], now=now
    )

    assert "Excellent Savings Rate" not in titles(insights)
    assert "Consider Increasing Savings" not in titles(insights)


def test_last_month_income_is_ignored_for_savings_rate(expense_factory, now):
    insights = generate_smart_insights(
        [expense_factory(100, date=THIS_MONTH)], [make_income(1000, date=LAST_MONTH)], [], now=now
    )

    assert "Excellent Savings Rate" not in titles(insights)


def test_subscription_review(expense_factory, now):
    expenses = [
        expense_factory(60, category="Utilities", description="Gym", recurring=True),
        expense_factory(50, category="Entertainment", description="Concert"),
    ]

    insights = generate_smart_insights(expenses, [], [], now=now)

    review = [i for i in insights if i.title == "Review Subscriptions"]
    assert len(review) == 1
    assert review[0].priority == "low"
    assert "$110.00 on subscriptions" in review[0].description
    assert "/month" not in review[0].description


def test_top_category_dominance(expense_factory, now):
    expenses = [
        expense_factory(50, category="Food", date=THIS_MONTH),
        expense_factory(30, category="Transportation", date=THIS_MONTH),
        expense_factory(20, category="Shopping", date=THIS_MONTH),
    ]

    insights = generate_smart_insights(expenses, [], [], now=now)

    assert titles(insights) == ["Food is Your Top Expense"]
    assert insights[0].description == "Food accounts for 50% of your spending this month"
    assert insights[0].action.target == "/expenses?category=Food"


def test_no_dominant_category(expense_factory, now):
    expenses = [
        expense_factory(25, category=category, date=THIS_MONTH)
        for category in ("Food", "Transportation", "Shopping", "Utilities")
    ]

    assert generate_smart_insights(expenses, [], [], now=now) == []


def test_insights_sorted_by_priority(expense_factory, now):
    """Test mixed rules come back high, medium, low"""
    expenses = [
        expense_factory(100, date=LAST_MONTH),
        expense_factory(200, date=THIS_MONTH),
    ]
    budgets = [Budget(category="Food", amount=100, spent=95)]

    insights = generate_smart_insights(expenses, [], budgets, now=now)

    assert [i.priority for i in insights] == ["high", "medium", "low"]
    assert titles(insights) == ["Spending Increased", "Food Budget Alert", "Food is Your Top Expense"]
