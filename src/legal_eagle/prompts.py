"""
Prompt templates for the AI analysis gateway.
"""

SYSTEM_PROMPT = """You are an expert legal analyst with extensive experience reviewing contracts,
agreements, and legal documents. Your analysis is accurate, practical, and accessible to non-lawyers.

Key principles:
- Explain legal terms in plain English
- Flag genuine risks without being alarmist
- Quote the original text you rely on
- Do not provide legal advice; your analysis is for informational purposes only
- Respond ONLY with valid JSON when a JSON format is requested
"""

ANALYSIS_PROMPT = """Analyze the following legal document. Your task is to:
1. Summarize the document's purpose in plain English.
2. Identify and explain the key clauses.
3. Flag any potential risks or unfavorable terms.
4. Extract any key dates or deadlines, such as contract end dates, notice periods, or payment due dates. Format all dates as YYYY-MM-DD.
5. List the names of all parties (counterparties) involved in the document.

DOCUMENT:
---
{document_text}
---

Provide your analysis in the following JSON format (respond ONLY with valid JSON):

{{
    "summary": "A concise, plain-English summary of the document's purpose and key outcomes",
    "keyClauses": [
        {{
            "clauseTitle": "A clear, simple title (e.g., 'Lease Duration & Renewal', 'Payment Terms')",
            "explanation": "What this clause means for the person signing it",
            "originalTextSnippet": "A short snippet of the original text this explanation refers to"
        }}
    ],
    "potentialRisks": [
        {{
            "riskTitle": "A brief title (e.g., 'Automatic Renewal Clause', 'High Late Fees')",
            "riskDescription": "Why this risk matters",
            "severity": "High/Medium/Low"
        }}
    ],
    "keyDates": [
        {{
            "eventName": "What happens on this date (e.g., 'Lease End Date')",
            "date": "YYYY-MM-DD",
            "originalTextSnippet": "The text where this date was found"
        }}
    ],
    "counterparties": ["Names of the parties, companies, or individuals involved"]
}}
"""

COMPARISON_PROMPT = """As a legal analyst, compare the two legal documents provided below. Identify the key differences in clauses, terms, obligations, and potential risks.
Provide a summary of the main differences, a clause-by-clause comparison for significant changes, and an overview of how the risk profiles differ.

Document 1:
---
{document_a}
---

Document 2:
---
{document_b}
---

Provide your comparison in the following JSON format (respond ONLY with valid JSON):

{{
    "overallSummary": "A high-level summary of the key differences",
    "clauseComparisons": [
        {{
            "clauseTitle": "The clause being compared (e.g., 'Termination Clause')",
            "summaryOfDifference": "How this clause differs",
            "detailsDoc1": "The clause as found in Document 1",
            "detailsDoc2": "The clause as found in Document 2"
        }}
    ],
    "riskProfileDifferences": [
        {{
            "riskTitle": "The risk being compared",
            "summaryOfDifference": "How this risk differs",
            "riskInDoc1": "Risk level or status in Document 1 (e.g., 'High', 'Not Present')",
            "riskInDoc2": "Risk level or status in Document 2 (e.g., 'Medium', 'Present')"
        }}
    ]
}}
"""

TITLE_PROMPT = """Based on the following text snippet, suggest a short, descriptive document title (e.g., "Lease Agreement - 123 Main St" or "NDA for Project X"). Return only the title text, with no quotation marks or extra words.

Snippet:
---
{snippet}
---
"""
