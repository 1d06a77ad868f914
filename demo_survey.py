"""
Demo: Create the example survey, submit a few responses and print the results.
"""

import json

from saysomething import SurveyRegistry, ValidationFailed
from saysomething.config import configure_logging, get_settings
from saysomething.examples import build_example_questions
from saysomething.serialization import creation_receipt, results_to_dict


def main():
    settings = get_settings()
    configure_logging(settings)
    registry = SurveyRegistry(settings)

    survey = registry.create_survey("Event Feedback", "Tell us how it went", build_example_questions())

    print("=" * 70)
    print("SURVEY CREATED")
    print("=" * 70)
    print(json.dumps(creation_receipt(survey, registry.links_for(survey)), indent=2))
    print()

    submissions = [
        {"name": "Ada", "track": "data", "topics": ["testing", "typing"], "rating": "5"},
        {"name": "Grace", "track": "web", "topics": ["typing"], "rating": 4},
        {"name": "Linus", "track": "ops", "rating": "3"},
        {"track": "mobile", "rating": "9"},
    ]
    for answers in submissions:
        try:
            response_id = registry.submit_response(survey.id, answers)
            print(f"✅ accepted {response_id}")
        except ValidationFailed as e:
            print("❌ rejected:")
            for violation in e.violations:
                print(f"    {violation}")
    print()

    print("📊 RESULTS")
    print(json.dumps(results_to_dict(registry.get_results(survey.id)), indent=2))
    print()

    print("📄 CSV EXPORT")
    print(registry.export_csv(survey.id, survey.admin_token))


if __name__ == "__main__":
    main()
