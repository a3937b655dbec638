from speakerline.main import serve

serve()
