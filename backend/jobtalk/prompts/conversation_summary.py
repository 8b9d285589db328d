"""
Conversation Summary Prompt — condenses a mentor chat into a short user profile.
"""

SYSTEM_PROMPT = (
    "Summarize the following conversation in 3-5 sentences. Focus on the user's "
    "background, interests, skills, experience and preferences."
)

USER_PROMPT_TEMPLATE = "Conversation log: {conversation_json}"
