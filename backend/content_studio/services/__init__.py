"""
Services package - Core business logic and integrations

Organized by domain responsibility:

    - gemini: Model service interface and the Gemini implementation
    - parsing: JSON recovery from model output
    - pipeline: Script, narration, image and video stages plus orchestrator
    - transcription: Microphone capture and the realtime session
    - orchestration: Job persistence
    - use_cases: Job lifecycle around the pipeline
"""
