TOPIC_ID = "TOPIC_ID"
SEED_URL = "http://seed.test"
