from music_server.main import main

main()
