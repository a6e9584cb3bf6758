"""Diagnostic logging for scoring analysis.

Captures simulation steps and live recommendation queries as JSON entries so
weight changes can be compared run by run.

Usage:
    from rov_draft.services.scoring_logger import ScoringLogger

    diag = ScoringLogger(enabled=True)
    diag.start_session("room-123", "simulation", "Team A", "Team B", "BLUE")
    diag.log_step(record)
    diag.save()
"""
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from rov_draft.models.recommendations import DraftStepRecord, LiveRecommendations

module_logger = logging.getLogger("rov_draft.scoring_diagnostics")


class ScoringLogger:
    """Captures detailed scoring diagnostics for analysis."""

    def __init__(self, output_dir: Optional[Path] = None, enabled: bool = False):
        """Initialize scoring logger.

        Args:
            output_dir: Directory to save diagnostic files. Defaults to logs/scoring/
            enabled: Whether logging is active. SCORING_DIAGNOSTICS=true/false overrides it.
        """
        env_enabled = os.environ.get("SCORING_DIAGNOSTICS", "").lower()
        if env_enabled == "true":
            enabled = True
        elif env_enabled == "false":
            enabled = False

        self.enabled = enabled
        self.output_dir = output_dir or Path(__file__).parents[4] / "logs" / "scoring"
        self.entries: list[dict] = []
        self.session_id: str = ""
        self.mode: str = ""
        self._metadata: dict = {}

        if self.enabled:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            module_logger.info(f"Scoring diagnostics enabled, output dir: {self.output_dir}")

    def start_session(
        self,
        session_id: str,
        mode: str,
        blue_team: str,
        red_team: str,
        perspective_side: Optional[str] = None,
        extra_metadata: Optional[dict] = None,
    ):
        """Initialize a new diagnostic session.

        Args:
            session_id: Room or run identifier
            mode: "simulation" or "live"
            blue_team: Blue team name
            red_team: Red team name
            perspective_side: The coached side
            extra_metadata: Any additional metadata to capture
        """
        if not self.enabled:
            return

        self.session_id = session_id
        self.mode = mode
        self.entries = []
        self._metadata = {
            "session_id": session_id,
            "mode": mode,
            "blue_team": blue_team,
            "red_team": red_team,
            "perspective_side": perspective_side,
            "started_at": datetime.now().isoformat(),
            **(extra_metadata or {}),
        }
        self.entries.append({
            "event": "session_start",
            "timestamp": datetime.now().isoformat(),
            **self._metadata,
        })

    def log_step(self, record: DraftStepRecord):
        """Log one simulated step with its top candidates."""
        if not self.enabled:
            return

        self.entries.append({
            "event": "simulation_step",
            "timestamp": datetime.now().isoformat(),
            **record.to_dict(),
        })

    def log_recommendations(self, recommendations: LiveRecommendations):
        """Log the four recommendation lists served for a human turn."""
        if not self.enabled:
            return

        self.entries.append({
            "event": "live_recommendations",
            "timestamp": datetime.now().isoformat(),
            **recommendations.to_dict(),
        })

    def log_error(self, error_message: str):
        if not self.enabled:
            return

        self.entries.append({
            "event": "error",
            "timestamp": datetime.now().isoformat(),
            "error": error_message,
        })
        module_logger.error(f"Scoring error logged: {error_message[:200]}...")

    def save(self, suffix: str = "") -> Optional[Path]:
        """Save diagnostics to JSON file.

        Returns:
            Path to saved file, or None if disabled/empty
        """
        if not self.enabled or not self.entries:
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        session_short = self.session_id[:8] if self.session_id else "unknown"
        filename = f"{self.mode}_{session_short}_{timestamp}{suffix}.json"
        output_path = self.output_dir / filename

        with open(output_path, "w") as f:
            json.dump({
                "metadata": self._metadata,
                "summary": self._compute_summary(),
                "entries": self.entries,
            }, f, indent=2)

        module_logger.info(f"Scoring diagnostics saved: {output_path}")
        return output_path

    def _compute_summary(self) -> dict:
        """Category frequencies of chosen heroes, fallbacks and errors."""
        steps = [e for e in self.entries if e["event"] == "simulation_step"]
        top_categories: dict[str, int] = {}
        for step in steps:
            top = step["top_candidates"][0]["top_category"] if step["top_candidates"] else None
            if step["fallback"]:
                top = "fallback"
            if top:
                top_categories[top] = top_categories.get(top, 0) + 1

        return {
            "total_steps": len(steps),
            "fallback_steps": sum(1 for s in steps if s["fallback"]),
            "recommendation_queries": sum(1 for e in self.entries if e["event"] == "live_recommendations"),
            "errors": sum(1 for e in self.entries if e["event"] == "error"),
            "chosen_by_category": top_categories,
        }
