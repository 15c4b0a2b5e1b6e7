import os
from typing import Dict, Any

class Config:
	"""Configuration for the changelog agent."""

	# Manifest
	MANIFEST_PATH = os.getenv("MANIFEST_PATH", "pom.xml")
	ARTIFACT_ID = os.getenv("ARTIFACT_ID", "ftoc")
	VERSION_LOOKAHEAD_LINES = int(os.getenv("VERSION_LOOKAHEAD_LINES", "1"))

	# Git
	GIT_BIN = os.getenv("GIT_BIN", "git")
	GIT_TIMEOUT_S = int(os.getenv("GIT_TIMEOUT_S", "30"))
	DEFAULT_UNTIL_REV = os.getenv("DEFAULT_UNTIL_REV", "HEAD")

	# Observability
	METRICS_ROOT = os.getenv("METRICS_ROOT", ".cache/changelog/metrics")
	METRICS_ENABLED = bool(int(os.getenv("METRICS_ENABLED", "1")))

	@classmethod
	def get_manifest_config(cls) -> Dict[str, Any]:
		"""Get manifest lookup configuration."""
		return {
			"path": cls.MANIFEST_PATH,
			"artifact_id": cls.ARTIFACT_ID,
			"lookahead": cls.VERSION_LOOKAHEAD_LINES,
		}

	@classmethod
	def get_git_config(cls) -> Dict[str, Any]:
		"""Get git invocation configuration."""
		return {
			"git_bin": cls.GIT_BIN,
			"timeout_s": cls.GIT_TIMEOUT_S,
		}
