NEAR_RETIREMENT_PROFILE_EXAMPLE = {
    "summary": "Near retirement, security first",
    "value": {
        "basic_context": {"age": 60, "target_retirement_age": 62, "marital_status": "married"},
        "values_discovery": {
            "ranked_values": [
                {
                    "id": "security_financial_security",
                    "title": "Financial security",
                    "category": "SECURITY",
                }
            ],
            "non_negotiables": ["security_financial_security"],
        },
        "financial_goals": {
            "goals": [
                {
                    "id": "goal_retire_early",
                    "label": "Retire early",
                    "category": "RETIREMENT",
                    "priority": "HIGH",
                    "time_horizon": "SHORT",
                }
            ]
        },
    },
}
FEDERAL_EMPLOYEE_PROFILE_EXAMPLE = {
    "summary": "Federal employee with an estate gap",
    "value": {
        "basic_context": {
            "age": 55,
            "target_retirement_age": 60,
            "federal_employee": {
                "agency": "VA",
                "years_of_service": 25,
                "retirement_system": "FERS",
            },
        },
        "financial_snapshot": {"has_estate_documents": False, "has_life_insurance": False},
    },
}
EMPTY_PROFILE_EXAMPLE = {
    "summary": "Empty profile",
    "value": {},
}

INSIGHTS_RESPONSE_EXAMPLE = {
    "summary": "Insights for a near-retirement profile",
    "value": {
        "strategy_profile": {
            "income_strategy": {
                "value": "STABILITY_FOCUSED",
                "confidence": 63,
                "rationale": "Leans STABILITY_FOCUSED because you ranked security first.",
                "inputs": ["values", "goals"],
            },
            "summary": "You favor stable, predictable income ...",
        },
        "focus_areas": {
            "top_priorities": ["RETIREMENT_INCOME", "INVESTMENT_STRATEGY", "TAX_OPTIMIZATION"],
            "excluded_domains": ["BENEFITS_OPTIMIZATION", "BUSINESS_CAREER"],
        },
        "actions": {"top_actions": ["retirement-income-sources", "investment-risk-review"]},
        "input_summary": {"completion_percentage": 50},
        "profile_hash": "sha256:3f1c...",
    },
}
READINESS_RESPONSE_EXAMPLE = {
    "summary": "Partially complete profile",
    "value": {
        "input_summary": {
            "has_values": True,
            "has_goals": True,
            "has_purpose": False,
            "has_basic_context": True,
            "completion_percentage": 43,
        },
        "ready": True,
        "status_message": "Basic insights available. Complete more sections for deeper analysis.",
        "missing_data_suggestions": [
            "Select all 5 top values in Values Discovery",
            "Complete your Statement of Financial Purpose",
        ],
    },
}
INVALID_PROFILE_EXAMPLE = {
    "summary": "Structurally invalid profile",
    "value": {
        "type": "about:blank",
        "title": "Unprocessable Content",
        "status": 422,
        "detail": "INVALID_PROFILE: basic_context.age: Input should be a valid integer",
        "instance": "/insights",
    },
}
DISABLED_EXAMPLE = {
    "summary": "Engine disabled",
    "value": {"detail": "INSIGHTS_ENGINE_DISABLED: set INSIGHTS_ENGINE_ENABLED=true to enable"},
}
