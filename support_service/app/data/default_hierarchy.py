# Ticket categories every new tenant starts with
DEFAULT_TICKET_HIERARCHY = [
    {
        "name": "Technical Support",
        "description": "Hardware, software and network problems",
        "color": "#3B82F6",
        "icon": "wrench",
        "subcategories": [
            {
                "name": "Hardware",
                "description": "Physical equipment issues",
                "actions": [
                    {"name": "Hardware Diagnosis", "estimated_time_minutes": 60, "action_type": "diagnostic"},
                    {"name": "Part Replacement", "estimated_time_minutes": 120, "action_type": "repair"},
                ],
            },
            {
                "name": "Software",
                "description": "Application and operating system issues",
                "actions": [
                    {"name": "Software Installation", "estimated_time_minutes": 45, "action_type": "installation"},
                    {"name": "Configuration", "estimated_time_minutes": 30, "action_type": "configuration"},
                ],
            },
            {
                "name": "Network",
                "description": "Connectivity and infrastructure",
                "actions": [
                    {"name": "Connectivity Check", "estimated_time_minutes": 30, "action_type": "diagnostic"},
                ],
            },
        ],
    },
    {
        "name": "Customer Service",
        "description": "General customer requests",
        "color": "#10B981",
        "icon": "headset",
        "subcategories": [
            {
                "name": "General Questions",
                "actions": [
                    {"name": "Provide Information", "estimated_time_minutes": 15, "action_type": "support"},
                ],
            },
            {
                "name": "Complaints",
                "actions": [
                    {"name": "Complaint Analysis", "estimated_time_minutes": 60, "action_type": "analysis"},
                ],
            },
            {"name": "Suggestions"},
        ],
    },
    {
        "name": "Billing",
        "description": "Invoices, payments and contracts",
        "color": "#F59E0B",
        "icon": "receipt",
        "subcategories": [
            {"name": "Invoicing"},
            {"name": "Payments"},
            {"name": "Contracts"},
        ],
    },
    {
        "name": "Administrative",
        "description": "Internal administrative requests",
        "color": "#6B7280",
        "icon": "briefcase",
        "subcategories": [],
    },
]
