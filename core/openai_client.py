# core/openai_client.py
"""
OpenAI API client wrapper.

Handles:
- Weekly progress summaries written from WeeklyStats and directives
- Coaching replies with optional knowledge context
"""
from typing import List, Optional

from openai import OpenAI

from modules.models import VolumeTrend, WeeklyStats
from utils.helpers import format_duration, format_number
from utils.logger import get_logger

COACH_SYSTEM_PROMPT = """You are Arlo, an AI performance and lifestyle coach. You communicate via text message with athletes and high performers.

Your coaching style:
- Calm, confident, and motivational
- Science-based but conversational
- Ask clarifying questions when needed
- Keep responses concise (2-3 sentences max for text)
- Focus on: workouts, recovery, sleep, nutrition, performance optimization"""

WEEKLY_SYSTEM_PROMPT = """You are Arlo, an AI performance coach. Generate a brief, personalized weekly progress summary. Be:
- Encouraging and supportive
- Specific about their data
- Science-based but conversational
- 3-4 sentences max
- End with one actionable tip for next week

Tone: Like a knowledgeable friend, not a corporate bot."""

NO_DATA_MESSAGE = """Hey {name},

I noticed you didn't log any workouts this week. No judgment - life happens!

Remember: one workout is infinitely better than zero. Even 15 minutes counts.

What's one small thing you can do tomorrow to get back on track?"""


def build_weekly_context(stats: WeeklyStats, prompts: List[str], name: str, goal: Optional[str]) -> str:
    """User message handed to the model for a weekly summary."""
    lines = [
        f"User: {name}",
        f"Goal: {goal or 'General fitness'}",
        "",
        "Week Summary:",
        f"- Total workouts: {stats.total_workouts}",
        f"- Cardio sessions: {stats.cardio_count}",
        f"- Strength sessions: {stats.strength_count}",
        f"- Days active: {stats.active_day_count}/7",
    ]
    if stats.total_distance > 0:
        lines.append(f"- Total distance: {format_number(stats.total_distance)}")
    if stats.total_duration_minutes > 0:
        lines.append(f"- Total cardio time: {format_duration(stats.total_duration_minutes)}")
    if stats.volume_change_percent is not None:
        lines.append(f"- Volume trend: {stats.volume_trend.value} ({stats.volume_change_percent}%)")

    lines.extend(["", "Key points to address:"])
    lines.extend(f"- {prompt}" for prompt in prompts)
    return "\n".join(lines)


def build_user_context(user: Optional[dict]) -> str:
    """Profile line for the coach reply; empty when the user is unknown."""
    if not user:
        return ""
    details = [user.get("name") or "Unknown"]
    if user.get("age"):
        details.append(f"{user['age']} years old")
    if user.get("gender"):
        details.append(user["gender"])
    return f"User info: {', '.join(details)}. Goals: {user.get('goal') or 'Not specified yet'}."


def fallback_weekly_insight(stats: WeeklyStats) -> str:
    """Summary used when the model call fails."""
    if stats.volume_trend is VolumeTrend.INCREASING:
        momentum = "Your volume is trending up - nice progress!"
    else:
        momentum = "Keep that consistency going!"

    balance = stats.training_balance
    if balance.cardio_percent > 80:
        focus = "Add 1-2 strength sessions"
    elif balance.strength_percent > 80:
        focus = "Mix in some cardio"
    else:
        focus = "Keep the balance going"

    return (f"Great week! You completed {stats.total_workouts} workouts across "
            f"{stats.active_day_count} days. {momentum}\n\nFocus for next week: {focus}")


class OpenAIClient:
    """Wrapper for OpenAI API"""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", client=None):
        self.client = client or OpenAI(api_key=api_key)
        self.model = model
        self.logger = get_logger("openai_client")

    def _complete(self, messages: List[dict], max_tokens: int) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=0.7,
            max_tokens=max_tokens
        )
        content = (response.choices[0].message.content or "").strip()
        if not content:
            raise ValueError("empty_completion")
        return content

    def generate_weekly_insight(
        self,
        stats: WeeklyStats,
        prompts: List[str],
        name: Optional[str] = None,
        goal: Optional[str] = None
    ) -> str:
        """
        Write the weekly summary message.

        An empty week gets the fixed re-engagement message without a model
        call; a failed call falls back to a templated summary.
        """
        if stats.no_data_this_week:
            return NO_DATA_MESSAGE.format(name=name or "there")

        context = build_weekly_context(stats, prompts, name or "User", goal)
        try:
            return self._complete(
                [
                    {"role": "system", "content": WEEKLY_SYSTEM_PROMPT},
                    {"role": "user", "content": context},
                ],
                max_tokens=200
            )
        except Exception as e:
            self.logger.error(f"Weekly insight generation failed, using fallback: {e}")
            return fallback_weekly_insight(stats)

    def coach_reply(self, message: str, knowledge_context: str = "", user_context: str = "") -> str:
        """
        Answer a conversational message, grounded on retrieved knowledge when present.
        """
        messages = [{"role": "system", "content": COACH_SYSTEM_PROMPT}]
        if user_context or knowledge_context:
            messages.append({"role": "system", "content": f"{user_context}{knowledge_context}".strip()})
        messages.append({"role": "user", "content": message})

        try:
            return self._complete(messages, max_tokens=150)
        except Exception as e:
            self.logger.error(f"Coach reply failed: {e}")
            return "Sorry, I couldn't put a reply together just now. Try me again in a minute."
