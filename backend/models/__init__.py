# Import all models to ensure they are registered with SQLAlchemy

from .base import Base
from .requirements.analysis_handoff import AnalysisHandoff
