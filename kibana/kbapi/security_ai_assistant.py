"""Security AI assistant API."""

from .base import APIGroup, Endpoint

ASSISTANT = "/api/security_ai_assistant"
CONVERSATIONS = ASSISTANT + "/current_user/conversations"
ENTRIES = ASSISTANT + "/knowledge_base/entries"


class SecurityAIAssistant(APIGroup):
    bulk_action_anonymization_fields = Endpoint(
        "POST", ASSISTANT + "/anonymization_fields/_bulk_action", "Apply a bulk action to anonymization fields."
    )
    list_anonymization_fields = Endpoint(
        "GET", ASSISTANT + "/anonymization_fields/_find", "Find anonymization fields."
    )
    create_model_response = Endpoint("POST", ASSISTANT + "/chat/complete", "Create a model response.")
    create_conversation = Endpoint("POST", CONVERSATIONS, "Create a conversation.")
    get_conversation = Endpoint("GET", CONVERSATIONS + "/{id}", "Get a conversation.")
    update_conversation = Endpoint("PUT", CONVERSATIONS + "/{id}", "Update a conversation.")
    delete_conversation = Endpoint("DELETE", CONVERSATIONS + "/{id}", "Delete a conversation.")
    list_conversations = Endpoint("GET", CONVERSATIONS + "/_find", "Find conversations.")
    create_knowledge_base = Endpoint(
        "POST", ASSISTANT + "/knowledge_base/{resource}", "Create a knowledge base."
    )
    get_knowledge_base = Endpoint("GET", ASSISTANT + "/knowledge_base/{resource}", "Get a knowledge base.")
    create_knowledge_base_entry = Endpoint("POST", ENTRIES, "Create a knowledge base entry.")
    get_knowledge_base_entry = Endpoint("GET", ENTRIES + "/{id}", "Get a knowledge base entry.")
    update_knowledge_base_entry = Endpoint("PUT", ENTRIES + "/{id}", "Update a knowledge base entry.")
    delete_knowledge_base_entry = Endpoint("DELETE", ENTRIES + "/{id}", "Delete a knowledge base entry.")
    list_knowledge_base_entries = Endpoint("GET", ENTRIES + "/_find", "Find knowledge base entries.")
    bulk_action_knowledge_base_entries = Endpoint(
        "POST", ENTRIES + "/_bulk_action", "Apply a bulk action to knowledge base entries."
    )
    bulk_action_prompts = Endpoint("POST", ASSISTANT + "/prompts/_bulk_action", "Apply a bulk action to prompts.")
    list_prompts = Endpoint("GET", ASSISTANT + "/prompts/_find", "Find prompts.")
