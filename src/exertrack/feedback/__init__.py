from .voice_feedback import VoiceFeedback

__all__ = ['VoiceFeedback']
