from skillstrong.models.conversation import ChatMessage, Conversation
from skillstrong.models.listings import Featured, Job, Program
from skillstrong.models.profile import UserProfile

__all__ = ["ChatMessage", "Conversation", "Featured", "Job", "Program", "UserProfile"]
